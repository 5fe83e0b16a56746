"""Tests for profiling module."""

from lazy_sequences.profiling import AllocatorComparator, MemoryProfiler, format_bytes
from lazy_sequences.sequences import ascending, fibonacci


def test_format_bytes():
    """Test human-readable byte formatting."""
    assert format_bytes(512) == "512.00 B"
    assert format_bytes(2048) == "2.00 KB"
    assert format_bytes(3 * 1024 ** 2) == "3.00 MB"
    assert format_bytes(5 * 1024 ** 4) == "5.00 TB"


def test_memory_profiler_reports_statistics():
    """Test that profiling returns memory stats and the operation's result."""
    profiler = MemoryProfiler()

    stats = profiler.profile("fibonacci", lambda: list(fibonacci(1000)))

    assert stats["operation"] == "fibonacci"
    assert stats["result"][-1] == 1597
    assert stats["peak_memory"] >= 0
    assert stats["elapsed_time"] >= 0
    assert stats["rss"] > 0
    assert "memory_percent" in stats


def test_allocator_comparator_matches_sequences():
    """Test that both allocators produce the same values."""
    comparator = AllocatorComparator()

    results = comparator.compare(fibonacci.body, 10, limit=20, repetitions=5)

    assert results["pooled"]["result"] == [0, 1, 1, 2, 3, 5, 8, 13]
    assert results["fixed"]["result"] == results["pooled"]["result"]


def test_allocator_comparator_with_unbounded_body():
    """Test comparing allocators on an infinite sequence."""
    results = AllocatorComparator().compare(ascending.body, 100, limit=3, repetitions=2)

    assert results["fixed"]["result"] == [100, 101, 102]
