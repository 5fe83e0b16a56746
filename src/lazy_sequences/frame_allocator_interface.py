"""Abstract interface for generator frame allocators."""

from abc import ABC, abstractmethod
from typing import Optional

from .models import AllocatorStats


class FrameBlock:
    """A block of memory backing one generator frame.

    The block keeps a reference to the allocator that produced it, so a frame
    can always be released correctly even after another allocator has been
    installed.
    """

    __slots__ = ("allocator", "memory", "offset", "size", "released")

    def __init__(
        self,
        allocator: "FrameAllocator",
        memory: memoryview,
        size: int,
        offset: int = 0,
    ):
        self.allocator = allocator
        self.memory = memory
        self.size = size
        self.offset = offset
        self.released = False

    def release(self) -> None:
        """Return the block to its allocator. Safe to call more than once."""
        if self.released:
            return
        self.released = True
        self.allocator.deallocate(self)

    def __repr__(self) -> str:
        return (
            f"FrameBlock(allocator={type(self.allocator).__name__}, "
            f"offset={self.offset}, size={self.size}, released={self.released})"
        )


class FrameAllocator(ABC):
    """Abstract base class for frame allocation strategies."""

    name: str = "frame_allocator"

    @abstractmethod
    def allocate(self, size: int) -> FrameBlock:
        """Allocate a block of at least ``size`` bytes.

        Args:
            size: Number of bytes the frame requires

        Returns:
            FrameBlock owned by the caller until released

        Raises:
            FrameAllocationError: If the block cannot be supplied
        """
        pass

    @abstractmethod
    def deallocate(self, block: FrameBlock) -> None:
        """Take back a block previously returned by ``allocate``.

        Args:
            block: Block to reclaim
        """
        pass

    @property
    @abstractmethod
    def stats(self) -> AllocatorStats:
        """Allocation counters for this allocator."""
        pass

    @property
    def capacity(self) -> Optional[int]:
        """Total bytes this allocator can hand out, or None when unbounded."""
        return None
