"""Sequence bodies used by the demo driver."""

from typing import Iterator, Optional, Union

from .generator import sequence

Number = Union[int, float]


@sequence
def ascending(start: Number = 0, step: Number = 1, stop: Optional[Number] = None) -> Iterator[Number]:
    """
    Count up from ``start``.

    The sequence is unbounded unless ``stop`` is given, in which case it ends
    before reaching ``stop``.

    Args:
        start: First value produced
        step: Increment between values
        stop: Exclusive upper bound for a positive step, or None for an
            infinite sequence

    Yields:
        start, start + step, start + 2 * step, ...
    """
    value = start
    while stop is None or value < stop:
        yield value
        value += step


@sequence
def fibonacci(ceiling: Number) -> Iterator[Number]:
    """
    Produce Fibonacci numbers until one exceeds ``ceiling``.

    The first value larger than the ceiling is still produced, then the
    sequence ends: a ceiling of 10 gives 0, 1, 1, 2, 3, 5, 8, 13.

    Args:
        ceiling: Upper bound that ends the sequence once exceeded

    Yields:
        Fibonacci numbers in order
    """
    current, following = 0, 1
    while True:
        yield current
        if current > ceiling:
            return
        current, following = following, current + following
