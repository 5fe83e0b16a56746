"""Tests for the iteration wrapper over generators."""

from itertools import islice

import pytest

from lazy_sequences.errors import NoValueError
from lazy_sequences.generator import Generator, SequencePosition
from lazy_sequences.sequences import ascending, fibonacci


def pull_all(gen):
    values = []
    while gen.advance():
        values.append(gen.current_value())
    return values


@pytest.mark.parametrize("ceiling", [0, 1, 10, 1000, 10e44])
def test_iteration_matches_manual_pulls(ceiling):
    """Test that iteration and advance/current_value produce the same values."""
    assert list(fibonacci(ceiling)) == pull_all(fibonacci(ceiling))


def test_begin_primes_first_value():
    """Test that begin() advances once and points at the first value."""
    gen = ascending(7)

    position = gen.begin()

    assert not position.is_end
    assert position.value == 7
    assert gen.current_value() == 7


def test_increment_reaches_end():
    """Test that incrementing past the last value gives the end position."""
    gen = ascending(0, stop=2)
    end = gen.end()

    position = gen.begin()
    assert position != end
    assert position.increment().value == 1
    assert position.increment() == end
    assert position.is_end

    with pytest.raises(NoValueError, match="end position"):
        position.value


def test_begin_on_empty_or_finished_is_end():
    """Test that begin() returns the end position when nothing is left."""
    assert Generator().begin() == Generator().end()

    gen = ascending(0, stop=1)
    while gen.advance():
        pass
    assert gen.begin().is_end


def test_end_positions_are_equal():
    """Test that any two end positions compare equal."""
    assert SequencePosition() == SequencePosition()
    assert ascending(0).end() == fibonacci(10).end()


def test_positions_on_different_frames_differ():
    """Test that live positions only equal positions on the same frame."""
    first_gen = ascending(0)
    second_gen = ascending(0)
    first = first_gen.begin()
    second = second_gen.begin()

    assert first == first
    assert first != second

    # Closing the handle ends every position on its frame
    first_gen.close()
    assert first == first_gen.end()


def test_positions_are_unhashable():
    """Test that positions cannot be used as dict keys."""
    with pytest.raises(TypeError):
        hash(SequencePosition())


def test_islice_over_infinite_sequence():
    """Test that an unbounded sequence can be consumed lazily."""
    assert list(islice(ascending(3), 5)) == [3, 4, 5, 6, 7]


def test_break_does_not_read_ahead():
    """Test that leaving a for loop keeps the last value and loses nothing."""
    gen = ascending(1)

    for value in gen:
        if value == 3:
            break

    assert gen.current_value() == 3
    assert gen.advance() is True
    assert gen.current_value() == 4


def test_iterating_moved_from_generator_is_empty():
    """Test that a moved-from generator yields nothing."""
    gen = fibonacci(10)
    target = gen.move()

    assert list(gen) == []
    assert list(target) == [0, 1, 1, 2, 3, 5, 8, 13]


def test_finished_generator_cannot_be_rewound():
    """Test that a second iteration over a finished generator is empty."""
    gen = fibonacci(10)

    assert len(list(gen)) == 8
    assert list(gen) == []
