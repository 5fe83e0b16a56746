"""Lazy Sequences - resumable, pull-driven sequence generators with pluggable frame allocation."""

__version__ = "0.1.0"

from .errors import FrameAllocationError, GeneratorBodyError, LazySequenceError, NoValueError
from .frame_allocator import (
    FixedCapacityFrameAllocator,
    PooledFrameAllocator,
    current_allocator,
    default_allocator,
    install_allocator,
    reset_to_default_allocator,
    using_allocator,
)
from .frame_allocator_interface import FrameAllocator, FrameBlock
from .generator import Generator, SequencePosition, sequence
from .models import AllocatorStats, BodyFailurePolicy, FrameState

__all__ = [
    # Generators
    "Generator",
    "SequencePosition",
    "sequence",
    "FrameState",
    "BodyFailurePolicy",
    # Allocators
    "FrameAllocator",
    "FrameBlock",
    "AllocatorStats",
    "PooledFrameAllocator",
    "FixedCapacityFrameAllocator",
    "current_allocator",
    "default_allocator",
    "install_allocator",
    "reset_to_default_allocator",
    "using_allocator",
    # Errors
    "LazySequenceError",
    "FrameAllocationError",
    "NoValueError",
    "GeneratorBodyError",
]
