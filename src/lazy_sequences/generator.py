"""Lazy, pull-driven sequence generators.

A ``Generator`` owns exactly one suspended frame. Creating it allocates the
frame and binds the body without running any of the body's statements;
``advance`` resumes the body up to its next yield or its end; and
``current_value`` reads what was produced. The handle is move-only and
releases its frame when closed, whatever state the body is in.

Example usage:

    from lazy_sequences import Generator

    def countdown(n):
        while n > 0:
            yield n
            n -= 1

    gen = Generator.create(countdown, 3)
    while gen.advance():
        print(gen.current_value())  # 3, 2, 1
"""

import collections.abc
import functools
import logging
import os
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar

from .errors import GeneratorBodyError, NoValueError
from .frame_allocator import current_allocator
from .frame_allocator_interface import FrameAllocator, FrameBlock
from .models import BodyFailurePolicy, FrameState, frame_size
from .protocols import LoggerProtocol, SequenceBody

T = TypeVar("T")

logger = logging.getLogger(__name__)

TERMINATE_EXIT_CODE = 1


class Frame(Generic[T]):
    """Suspended execution of one sequence body.

    The frame holds the body iterator (its saved position), the latest value
    it produced and the allocator block backing it. Only the owning
    ``Generator`` and positions derived from it touch a frame.
    """

    __slots__ = ("_body", "_block", "_value", "_state", "_yield_count", "_policy", "_name")

    def __init__(
        self,
        body: Iterator[T],
        block: FrameBlock,
        policy: BodyFailurePolicy = BodyFailurePolicy.RAISE,
        name: str = "sequence",
    ):
        self._body = body
        self._block = block
        self._value: Optional[T] = None
        self._state = FrameState.NOT_STARTED
        self._yield_count = 0
        self._policy = BodyFailurePolicy(policy)
        self._name = name

    @property
    def state(self) -> FrameState:
        return self._state

    @property
    def finished(self) -> bool:
        return self._state is FrameState.FINISHED

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def yield_count(self) -> int:
        return self._yield_count

    @property
    def block(self) -> FrameBlock:
        return self._block

    def resume(self) -> bool:
        """Run the body until its next yield or its end.

        Returns:
            True if a value was produced, False if the body has finished

        Raises:
            GeneratorBodyError: If the body raises and the policy is RAISE
        """
        if self._state is FrameState.FINISHED:
            return False

        try:
            value = next(self._body)
        except StopIteration:
            self._finish()
            logger.debug(f"Sequence '{self._name}' finished after {self._yield_count} values")
            return False
        except Exception as e:
            yielded = self._yield_count
            self._finish()
            if self._policy is BodyFailurePolicy.TERMINATE:
                self._terminate(e, yielded)
                return False

            logger.error(f"Sequence '{self._name}' failed after {yielded} values: {e!r}")
            raise GeneratorBodyError(
                f"Sequence '{self._name}' raised {type(e).__name__}: {e}"
            ) from e
        except BaseException:
            # KeyboardInterrupt and friends propagate untouched; the body is dead either way
            self._finish()
            raise

        self._value = value
        self._state = FrameState.SUSPENDED
        self._yield_count += 1
        return True

    def destroy(self) -> None:
        """Close the body and give the block back to its allocator."""
        if self._block.released:
            return
        try:
            close = getattr(self._body, "close", None)
            if close is not None:
                close()
        finally:
            self._finish()

    def _finish(self) -> None:
        self._value = None
        self._state = FrameState.FINISHED
        self._block.release()

    def _terminate(self, error: Exception, yielded: int) -> None:
        logger.critical(
            f"Sequence '{self._name}' failed after {yielded} values: {error!r}. Terminating.",
            exc_info=error,
        )
        logging.shutdown()
        os._exit(TERMINATE_EXIT_CODE)


class SequencePosition(Generic[T]):
    """Iterator-style position over a generator's frame.

    A position is either the end position or references a live frame.
    ``increment`` resumes the frame and turns the position into the end
    position once the body finishes.
    """

    __slots__ = ("_frame",)

    def __init__(self, frame: Optional[Frame[T]] = None):
        self._frame = frame

    def _live_frame(self) -> Optional[Frame[T]]:
        if self._frame is None or self._frame.finished:
            return None
        return self._frame

    @property
    def is_end(self) -> bool:
        return self._live_frame() is None

    @property
    def value(self) -> T:
        """Dereference the position.

        Raises:
            NoValueError: If this is the end position
        """
        frame = self._live_frame()
        if frame is None or frame.state is not FrameState.SUSPENDED:
            raise NoValueError("Cannot dereference the end position of a sequence")
        return frame.value

    def increment(self) -> "SequencePosition[T]":
        """Advance to the next value; becomes the end position when done."""
        if self._frame is not None and not self._frame.resume():
            self._frame = None
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SequencePosition):
            return NotImplemented
        return self._live_frame() is other._live_frame()

    __hash__ = None

    def __repr__(self) -> str:
        return "SequencePosition(end)" if self.is_end else f"SequencePosition({self._frame.value!r})"


class Generator(Generic[T]):
    """Move-only handle to a lazily evaluated sequence.

    Handles are created with ``Generator.create`` (or by calling a function
    decorated with ``@sequence``). They cannot be copied or pickled;
    ownership moves with ``move`` and ``move_from``.
    """

    def __init__(self, frame: Optional[Frame[T]] = None, logger: Optional[LoggerProtocol] = None):
        """
        Initialize a handle around an existing frame.

        Args:
            frame: Frame to own, or None for an empty handle
            logger: Logger instance
        """
        self._frame = frame
        self._logger = logger or logging.getLogger(__name__)

    @classmethod
    def create(
        cls,
        body: SequenceBody,
        *args: Any,
        allocator: Optional[FrameAllocator] = None,
        on_body_failure: BodyFailurePolicy = BodyFailurePolicy.RAISE,
        **kwargs: Any,
    ) -> "Generator[T]":
        """
        Create a suspended generator for ``body(*args, **kwargs)``.

        No statement of the body runs until the first ``advance``.

        Args:
            body: Generator function (or callable returning an iterator)
            *args: Positional arguments for the body
            allocator: Allocator for the frame; defaults to the installed one
            on_body_failure: What to do when the body raises
            **kwargs: Keyword arguments for the body

        Returns:
            Generator owning the new frame

        Raises:
            FrameAllocationError: If no frame can be allocated
            TypeError: If the body does not return an iterator
        """
        allocator = allocator or current_allocator()
        name = getattr(body, "__qualname__", type(body).__name__)
        size = frame_size(body)

        block = allocator.allocate(size)
        try:
            suspended = body(*args, **kwargs)
            if not isinstance(suspended, collections.abc.Iterator):
                raise TypeError(
                    f"Sequence body '{name}' must return an iterator, "
                    f"got {type(suspended).__name__}"
                )
        except BaseException:
            block.release()
            raise

        logger.debug(f"Created sequence '{name}' with a {block.size}-byte frame from {allocator.name}")
        return cls(Frame(suspended, block, on_body_failure, name))

    # Pull protocol

    def advance(self) -> bool:
        """
        Resume the body until it yields the next value or finishes.

        Returns:
            True if a new value is available through ``current_value``;
            False if the handle is empty or the sequence has finished
        """
        if self._frame is None:
            return False
        return self._frame.resume()

    def current_value(self) -> Optional[T]:
        """Return the last produced value, or None when there is none.

        None doubles as "no value", so bodies should not yield None. Use
        ``has_value`` (or the result of ``advance``) when a body might.
        """
        if self._frame is None or self._frame.state is not FrameState.SUSPENDED:
            return None
        return self._frame.value

    def value(self) -> T:
        """
        Return the last produced value.

        Raises:
            NoValueError: If the generator is empty, not started or finished
        """
        if not self.has_value:
            raise NoValueError(f"Generator holds no value (state: {self.state.value})")
        return self._frame.value

    @property
    def has_value(self) -> bool:
        return self._frame is not None and self._frame.state is FrameState.SUSPENDED

    @property
    def state(self) -> FrameState:
        return FrameState.EMPTY if self._frame is None else self._frame.state

    @property
    def done(self) -> bool:
        return self._frame is None or self._frame.finished

    @property
    def yield_count(self) -> int:
        return 0 if self._frame is None else self._frame.yield_count

    # Iteration protocol

    def begin(self) -> SequencePosition[T]:
        """Prime the first value and return a position on it."""
        if self.done:
            return self.end()
        return SequencePosition(self._frame).increment()

    def end(self) -> SequencePosition[T]:
        return SequencePosition()

    def __iter__(self) -> Iterator[T]:
        position = self.begin()
        end = self.end()
        while position != end:
            yield position.value
            position.increment()

    # Ownership

    def move(self) -> "Generator[T]":
        """Transfer the frame to a new handle, leaving this one empty."""
        frame, self._frame = self._frame, None
        return type(self)(frame, self._logger)

    def move_from(self, other: "Generator[T]") -> "Generator[T]":
        """
        Take ownership of ``other``'s frame.

        Any frame this handle owns is released first. Moving a handle into
        itself does nothing.
        """
        if other is self:
            return self
        self.close()
        self._frame, other._frame = other._frame, None
        return self

    def close(self) -> None:
        """Release the frame, whether or not the body has finished."""
        frame, self._frame = self._frame, None
        if frame is not None:
            frame.destroy()
            self._logger.debug(f"Closed generator after {frame.yield_count} values")

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and release the frame."""
        self.close()

    def __del__(self):
        if getattr(self, "_frame", None) is not None:
            self.close()

    def __copy__(self):
        raise TypeError("Generator handles cannot be copied; use move() to transfer ownership")

    def __deepcopy__(self, memo):
        raise TypeError("Generator handles cannot be copied; use move() to transfer ownership")

    def __reduce__(self):
        raise TypeError("Generator handles cannot be pickled")

    def __bool__(self) -> bool:
        return self._frame is not None

    def __repr__(self) -> str:
        return f"Generator(state={self.state.value}, yields={self.yield_count})"


def sequence(
    body: Optional[SequenceBody] = None,
    *,
    allocator: Optional[FrameAllocator] = None,
    on_body_failure: BodyFailurePolicy = BodyFailurePolicy.RAISE,
):
    """Turn a generator function into a sequence-producing procedure.

    Calling the decorated function returns a suspended ``Generator``:

        @sequence
        def naturals():
            n = 0
            while True:
                yield n
                n += 1

        gen = naturals()
        gen.advance()  # True, gen.current_value() == 0

    The keywords ``allocator`` and ``on_body_failure`` are reserved: passed
    to the decorated function they override the decorator's defaults for
    that call and are not forwarded to the body.
    """

    def decorate(func: SequenceBody) -> Callable[..., Generator[T]]:
        @functools.wraps(func)
        def create(*args: Any, **kwargs: Any) -> Generator[T]:
            return Generator.create(
                func,
                *args,
                allocator=kwargs.pop("allocator", allocator),
                on_body_failure=kwargs.pop("on_body_failure", on_body_failure),
                **kwargs,
            )

        create.body = func
        return create

    if body is not None:
        return decorate(body)
    return decorate
