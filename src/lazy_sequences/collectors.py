"""Helpers that consume generators."""

import logging
from typing import List, Optional, TypeVar

import pandas as pd

from .generator import Generator

T = TypeVar("T")

logger = logging.getLogger(__name__)


def take(generator: Generator[T], count: int) -> List[T]:
    """
    Pull up to ``count`` values from ``generator``.

    Stops early if the sequence finishes. Safe on unbounded sequences.

    Args:
        generator: Generator to pull from
        count: Maximum number of values

    Returns:
        Values in the order they were produced
    """
    if count < 0:
        raise ValueError("count must not be negative")

    values: List[T] = []
    while len(values) < count and generator.advance():
        values.append(generator.current_value())
    return values


def to_dataframe(
    generator: Generator[T],
    limit: Optional[int] = None,
    column: str = "value",
) -> pd.DataFrame:
    """
    Tabulate the values of a generator.

    Args:
        generator: Generator to pull from
        limit: Maximum number of rows; required for unbounded sequences
        column: Name of the value column

    Returns:
        DataFrame with one row per value, indexed from 1
    """
    if limit is None:
        values = list(generator)
    else:
        values = take(generator, limit)

    df = pd.DataFrame({column: values})
    df.index = pd.RangeIndex(start=1, stop=len(values) + 1, name="n")

    logger.debug(f"Tabulated {len(df)} sequence values")
    return df
