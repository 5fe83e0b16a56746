"""Frame allocators and the currently installed allocator slot."""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from .errors import FrameAllocationError
from .frame_allocator_interface import FrameAllocator, FrameBlock
from .models import AllocatorStats
from .protocols import LoggerProtocol

logger = logging.getLogger(__name__)


class PooledFrameAllocator(FrameAllocator):
    """Allocate frames from thread-local pools of reusable blocks.

    Requests are rounded up to a size class. Released blocks go back to the
    free list of the releasing thread and are handed out again on the next
    request of the same class, so steady-state generator churn does not
    create new buffers.
    """

    name = "pooled"

    def __init__(
        self,
        size_class_bytes: int = 64,
        max_blocks_per_class: int = 32,
        logger: Optional[LoggerProtocol] = None,
    ):
        """Initialize the pooled allocator.

        Args:
            size_class_bytes: Granularity that requests are rounded up to
            max_blocks_per_class: Free blocks kept per size class and thread
            logger: Logger instance
        """
        if size_class_bytes <= 0:
            raise ValueError("size_class_bytes must be positive")
        if max_blocks_per_class < 0:
            raise ValueError("max_blocks_per_class must not be negative")

        self.size_class_bytes = size_class_bytes
        self.max_blocks_per_class = max_blocks_per_class
        self._logger = logger or logging.getLogger(__name__)
        self._local = threading.local()
        self._stats = AllocatorStats()
        self._stats_lock = threading.Lock()

    @property
    def stats(self) -> AllocatorStats:
        return self._stats

    def _pool(self) -> Dict[int, List[bytearray]]:
        pool = getattr(self._local, "pool", None)
        if pool is None:
            pool = {}
            self._local.pool = pool
        return pool

    def _size_class(self, size: int) -> int:
        classes = max(1, -(-size // self.size_class_bytes))
        return classes * self.size_class_bytes

    def pooled_blocks(self) -> int:
        """Number of free blocks held for the calling thread."""
        return sum(len(free) for free in self._pool().values())

    def allocate(self, size: int) -> FrameBlock:
        """Allocate a block, reusing a pooled one when available.

        Args:
            size: Number of bytes the frame requires

        Returns:
            FrameBlock of the rounded-up size class

        Raises:
            FrameAllocationError: If a new buffer cannot be created
        """
        if size < 0:
            raise ValueError(f"Frame size must not be negative, got {size}")

        size_class = self._size_class(size)
        free = self._pool().get(size_class)
        reused = bool(free)

        if reused:
            buffer = free.pop()
        else:
            try:
                buffer = bytearray(size_class)
            except MemoryError as e:
                self._logger.warning(f"Pooled allocator could not create {size_class} bytes")
                raise FrameAllocationError(
                    f"Unable to allocate a {size_class}-byte frame: {e}",
                    requested_bytes=size_class,
                ) from e

        with self._stats_lock:
            self._stats.record_allocation(size_class, reused=reused)

        self._logger.debug(
            f"Allocated {size_class}-byte frame block ({'reused' if reused else 'new'})"
        )
        return FrameBlock(self, memoryview(buffer), size_class)

    def deallocate(self, block: FrameBlock) -> None:
        """Return a block to the calling thread's pool.

        Args:
            block: Block previously returned by ``allocate``
        """
        buffer = block.memory.obj
        block.memory.release()

        with self._stats_lock:
            self._stats.record_deallocation(block.size)

        free = self._pool().setdefault(block.size, [])
        if len(free) < self.max_blocks_per_class:
            free.append(buffer)
            self._logger.debug(f"Returned {block.size}-byte frame block to pool")
        else:
            self._logger.debug(f"Pool for {block.size}-byte blocks is full, dropping block")

    def clear(self) -> None:
        """Drop every pooled block held for the calling thread."""
        self._pool().clear()


class FixedCapacityFrameAllocator(FrameAllocator):
    """Allocate frames from a fixed, caller-owned buffer.

    Blocks are carved from the buffer with a bump pointer and released
    stack-style: freeing the topmost block rolls the pointer back to the end
    of the highest block still live. The buffer stays owned by the caller,
    who keeps it alive for as long as any frame allocated from it exists.
    """

    name = "fixed"

    def __init__(
        self,
        buffer: Optional[bytearray] = None,
        capacity: Optional[int] = None,
        alignment: int = 16,
        logger: Optional[LoggerProtocol] = None,
    ):
        """Initialize the fixed-capacity allocator.

        Args:
            buffer: Backing memory; created from ``capacity`` when omitted
            capacity: Size of the buffer to create when ``buffer`` is omitted
            alignment: Block offsets and sizes are multiples of this value
            logger: Logger instance
        """
        if buffer is None:
            if capacity is None:
                raise ValueError("Either buffer or capacity must be provided")
            if capacity < 0:
                raise ValueError("capacity must not be negative")
            buffer = bytearray(capacity)
        if alignment <= 0:
            raise ValueError("alignment must be positive")

        self._memory = memoryview(buffer)
        self.alignment = alignment
        self._offset = 0
        self._live: Dict[int, int] = {}
        self._logger = logger or logging.getLogger(__name__)
        self._stats = AllocatorStats()

        self._logger.debug(f"Initialized fixed-capacity allocator with {len(self._memory)} bytes")

    @property
    def stats(self) -> AllocatorStats:
        return self._stats

    @property
    def capacity(self) -> int:
        return len(self._memory)

    @property
    def available(self) -> int:
        """Bytes left above the current bump pointer."""
        return self.capacity - self._offset

    def _aligned(self, size: int) -> int:
        return -(-size // self.alignment) * self.alignment

    def allocate(self, size: int) -> FrameBlock:
        """Carve a block from the buffer.

        Args:
            size: Number of bytes the frame requires

        Returns:
            FrameBlock viewing a slice of the buffer

        Raises:
            FrameAllocationError: If the buffer has no room for the block
        """
        if size < 0:
            raise ValueError(f"Frame size must not be negative, got {size}")

        aligned = self._aligned(max(size, 1))
        if self._offset + aligned > self.capacity:
            self._logger.warning(
                f"Fixed-capacity allocator exhausted: requested {aligned} bytes, "
                f"{self.available} of {self.capacity} available"
            )
            raise FrameAllocationError(
                f"Fixed-capacity allocator cannot supply {aligned} bytes "
                f"({self.available} of {self.capacity} available)",
                requested_bytes=aligned,
                available_bytes=self.available,
            )

        offset = self._offset
        self._offset += aligned
        self._live[offset] = aligned
        self._stats.record_allocation(aligned)

        self._logger.debug(f"Allocated {aligned}-byte frame block at offset {offset}")
        return FrameBlock(self, self._memory[offset:offset + aligned], aligned, offset)

    def deallocate(self, block: FrameBlock) -> None:
        """Release a block, rolling the bump pointer back when possible.

        Args:
            block: Block previously returned by ``allocate``
        """
        if self._live.pop(block.offset, None) is None:
            raise ValueError(f"Block at offset {block.offset} was not allocated here")

        block.memory.release()
        self._stats.record_deallocation(block.size)
        self._offset = max(
            (offset + size for offset, size in self._live.items()), default=0
        )
        self._logger.debug(
            f"Released {block.size}-byte frame block at offset {block.offset} "
            f"(offset now {self._offset})"
        )


_default_allocator = PooledFrameAllocator()
_installed = threading.local()


def default_allocator() -> FrameAllocator:
    """Return the process-wide default pooled allocator."""
    return _default_allocator


def current_allocator() -> FrameAllocator:
    """Return the allocator installed for the calling thread, or the default."""
    allocator = getattr(_installed, "allocator", None)
    return allocator if allocator is not None else _default_allocator


def install_allocator(allocator: FrameAllocator) -> FrameAllocator:
    """Install ``allocator`` for frames created on the calling thread.

    Frames that already exist keep releasing through their own allocator.
    The installer keeps ownership of any buffer behind ``allocator``.

    Args:
        allocator: Allocator consulted by subsequent ``Generator.create`` calls

    Returns:
        The previously installed allocator, so callers can restore it
    """
    previous = current_allocator()
    _installed.allocator = allocator
    logger.debug(f"Installed {type(allocator).__name__} as frame allocator")
    return previous


def reset_to_default_allocator() -> None:
    """Make the default pooled allocator current again."""
    _installed.allocator = None
    logger.debug("Reset frame allocator to default")


@contextmanager
def using_allocator(allocator: FrameAllocator) -> Iterator[FrameAllocator]:
    """Install ``allocator`` for the duration of a ``with`` block."""
    previous = install_allocator(allocator)
    try:
        yield allocator
    finally:
        if previous is _default_allocator:
            reset_to_default_allocator()
        else:
            install_allocator(previous)
