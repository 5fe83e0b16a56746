"""Tests for collectors module."""

import pytest

from lazy_sequences.collectors import take, to_dataframe
from lazy_sequences.sequences import ascending, fibonacci


def test_take_pulls_requested_count():
    """Test taking a prefix of an unbounded sequence."""
    gen = ascending(1)

    assert take(gen, 3) == [1, 2, 3]
    assert take(gen, 2) == [4, 5]


def test_take_stops_when_sequence_finishes():
    """Test taking more values than a finite sequence has."""
    assert take(fibonacci(10), 100) == [0, 1, 1, 2, 3, 5, 8, 13]


def test_take_zero_and_negative():
    """Test edge counts."""
    gen = ascending(1)

    assert take(gen, 0) == []
    assert gen.current_value() is None

    with pytest.raises(ValueError, match="must not be negative"):
        take(gen, -1)


def test_to_dataframe_finite():
    """Test tabulating a finite sequence."""
    df = to_dataframe(fibonacci(10))

    assert list(df.columns) == ["value"]
    assert len(df) == 8
    assert df.index[0] == 1
    assert df.index.name == "n"
    assert df["value"].tolist() == [0, 1, 1, 2, 3, 5, 8, 13]


def test_to_dataframe_with_limit():
    """Test tabulating a prefix of an unbounded sequence."""
    df = to_dataframe(ascending(10), limit=4, column="count")

    assert df["count"].tolist() == [10, 11, 12, 13]
    assert df.loc[4, "count"] == 13


def test_to_dataframe_empty():
    """Test tabulating a sequence with no values."""
    df = to_dataframe(ascending(0, stop=0))

    assert df.empty
    assert list(df.columns) == ["value"]
