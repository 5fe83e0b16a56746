"""Shared fixtures for lazy sequence tests."""

import pytest

from lazy_sequences.frame_allocator import PooledFrameAllocator, reset_to_default_allocator


@pytest.fixture(autouse=True)
def default_allocator_installed():
    """Make sure every test starts and ends with the default allocator."""
    reset_to_default_allocator()
    yield
    reset_to_default_allocator()


@pytest.fixture
def pool():
    """A fresh pooled allocator whose counters belong to one test."""
    return PooledFrameAllocator()
