"""Protocol definitions for dependency inversion."""

from typing import Any, Iterator, Protocol


class SequenceBody(Protocol):
    """Protocol for sequence bodies.

    A body is a generator function (or any callable returning an iterator).
    Calling it must not run any body statement; values are produced on
    demand as the returned iterator is resumed.
    """

    def __call__(self, *args: Any, **kwargs: Any) -> Iterator[Any]:
        """Create the suspended body."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging."""

    def info(self, message: str) -> None:
        """Log info message."""
        ...

    def debug(self, message: str) -> None:
        """Log debug message."""
        ...

    def warning(self, message: str) -> None:
        """Log warning message."""
        ...

    def error(self, message: str) -> None:
        """Log error message."""
        ...
