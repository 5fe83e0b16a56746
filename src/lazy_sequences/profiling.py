"""Memory profiling and allocator comparison."""

import gc
import logging
import os
import time
import tracemalloc
from typing import Any, Callable, Dict, Iterator, List, Optional

import psutil

from .collectors import take
from .frame_allocator import FixedCapacityFrameAllocator, default_allocator
from .frame_allocator_interface import FrameAllocator
from .generator import Generator
from .protocols import LoggerProtocol


class MemoryProfiler:
    """
    Profiles memory usage for operations.

    Single Responsibility: Track and report memory statistics.
    """

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        """
        Initialize memory profiler.

        Args:
            logger: Logger instance
        """
        self._logger = logger or logging.getLogger(__name__)

    def profile(self, operation_name: str, operation_func: Callable[[], Any]) -> Dict[str, Any]:
        """
        Profile memory usage of an operation.

        Args:
            operation_name: Name of the operation
            operation_func: Function to execute

        Returns:
            Dictionary with memory statistics and the operation's result
        """
        gc.collect()

        tracemalloc.start()
        start_time = time.perf_counter()
        try:
            result = operation_func()
            elapsed_time = time.perf_counter() - start_time
            current_mem, peak_mem = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        process = psutil.Process(os.getpid())
        mem_info = process.memory_info()

        stats = {
            "operation": operation_name,
            "elapsed_time": elapsed_time,
            "current_memory": current_mem,
            "peak_memory": peak_mem,
            "rss": mem_info.rss,
            "vms": mem_info.vms,
            "memory_percent": process.memory_percent(),
            "result": result,
        }

        self._logger.debug(
            f"{operation_name}: peak {format_bytes(peak_mem)} in {elapsed_time:.4f} seconds"
        )
        return stats


class AllocatorComparator:
    """
    Compares the default allocator with a fixed-capacity one.

    Single Responsibility: Run one body under both allocators, check that
    the sequences match and report memory and timing.
    """

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        """
        Initialize comparator.

        Args:
            logger: Logger instance
        """
        self._logger = logger or logging.getLogger(__name__)
        self.profiler = MemoryProfiler(logger)

    def compare(
        self,
        body: Callable[..., Iterator[Any]],
        *args: Any,
        limit: int = 100,
        repetitions: int = 100,
        capacity_bytes: int = 4096,
    ) -> Dict[str, Dict[str, Any]]:
        """
        Run ``body(*args)`` repeatedly under each allocator.

        Args:
            body: Sequence body (a plain generator function)
            *args: Arguments for the body
            limit: Values pulled from each generator
            repetitions: Generators created per allocator
            capacity_bytes: Buffer size of the fixed-capacity allocator

        Returns:
            Profiling statistics keyed by allocator name

        Raises:
            ValueError: If the allocators produce different sequences
        """
        fixed = FixedCapacityFrameAllocator(capacity=capacity_bytes)

        pooled_stats = self.profiler.profile(
            "Pooled Allocator",
            lambda: self._run(body, args, default_allocator(), limit, repetitions),
        )
        fixed_stats = self.profiler.profile(
            "Fixed-Capacity Allocator",
            lambda: self._run(body, args, fixed, limit, repetitions),
        )

        if pooled_stats["result"] != fixed_stats["result"]:
            raise ValueError("Allocators produced different sequences")

        self._log_comparison(pooled_stats, fixed_stats)
        return {"pooled": pooled_stats, "fixed": fixed_stats}

    @staticmethod
    def _run(
        body: Callable[..., Iterator[Any]],
        args: tuple,
        allocator: FrameAllocator,
        limit: int,
        repetitions: int,
    ) -> List[Any]:
        values: List[Any] = []
        for _ in range(repetitions):
            with Generator.create(body, *args, allocator=allocator) as gen:
                values = take(gen, limit)
        return values

    def _log_comparison(self, pooled_stats: Dict, fixed_stats: Dict):
        """Log comparison results."""
        self._logger.info("=" * 80)
        self._logger.info("ALLOCATOR COMPARISON")
        self._logger.info("=" * 80)
        self._logger.info(
            f"Peak Memory Usage:\n"
            f"  Pooled:         {format_bytes(pooled_stats['peak_memory'])}\n"
            f"  Fixed-Capacity: {format_bytes(fixed_stats['peak_memory'])}"
        )
        self._logger.info(
            f"Execution Time:\n"
            f"  Pooled:         {pooled_stats['elapsed_time']:.4f} seconds\n"
            f"  Fixed-Capacity: {fixed_stats['elapsed_time']:.4f} seconds"
        )
        self._logger.info(f"Both allocators produced {len(pooled_stats['result'])} identical values")


def format_bytes(bytes_value: float) -> str:
    """Format bytes to human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if bytes_value < 1024.0:
            return f"{bytes_value:.2f} {unit}"
        bytes_value /= 1024.0
    return f"{bytes_value:.2f} TB"
