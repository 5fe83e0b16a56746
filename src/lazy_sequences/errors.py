"""Exceptions raised by lazy sequence generators and frame allocators."""


class LazySequenceError(Exception):
    """Base class for all lazy sequence errors."""


class FrameAllocationError(LazySequenceError, MemoryError):
    """A frame could not be allocated for a new generator.

    Raised by ``Generator.create`` when the installed allocator cannot supply
    a block, including when a fixed-capacity allocator is exhausted.
    """

    def __init__(self, message: str, requested_bytes: int = 0, available_bytes: int = 0):
        super().__init__(message)
        self.requested_bytes = requested_bytes
        self.available_bytes = available_bytes


class NoValueError(LazySequenceError, LookupError):
    """A value was read from a generator that does not currently hold one."""


class GeneratorBodyError(LazySequenceError, RuntimeError):
    """The sequence body raised an exception while being resumed."""
