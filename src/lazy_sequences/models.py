"""Data models shared by generators and frame allocators."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable

# Layout used to size a frame from its body's code object.
FRAME_HEADER_BYTES = 64
SLOT_BYTES = 8


class FrameState(str, Enum):
    """Lifecycle state of a generator frame."""

    NOT_STARTED = "not_started"
    SUSPENDED = "suspended"
    FINISHED = "finished"
    EMPTY = "empty"


class BodyFailurePolicy(str, Enum):
    """What happens when a sequence body raises."""

    RAISE = "raise"
    TERMINATE = "terminate"


class AllocatorKind(str, Enum):
    """Frame allocator strategies selectable from configuration."""

    POOLED = "pooled"
    FIXED = "fixed"


@dataclass
class AllocatorStats:
    """Counters kept by every frame allocator."""

    allocations: int = 0
    deallocations: int = 0
    reused_blocks: int = 0
    bytes_in_use: int = 0
    peak_bytes_in_use: int = 0

    @property
    def outstanding(self) -> int:
        """Number of blocks handed out and not yet returned."""
        return self.allocations - self.deallocations

    def record_allocation(self, size: int, reused: bool = False) -> None:
        self.allocations += 1
        if reused:
            self.reused_blocks += 1
        self.bytes_in_use += size
        self.peak_bytes_in_use = max(self.peak_bytes_in_use, self.bytes_in_use)

    def record_deallocation(self, size: int) -> None:
        self.deallocations += 1
        self.bytes_in_use -= size


def frame_size(body: Callable) -> int:
    """Return the number of bytes a frame for ``body`` requires.

    The size mirrors an interpreter frame: a fixed header plus one slot per
    local, cell, free variable and value-stack entry of the body's code.
    Callables without a code object only need the header.
    """
    code = getattr(body, "__code__", None)
    if code is None:
        return FRAME_HEADER_BYTES

    slots = (
        code.co_stacksize
        + code.co_nlocals
        + len(code.co_cellvars)
        + len(code.co_freevars)
    )
    return FRAME_HEADER_BYTES + slots * SLOT_BYTES
