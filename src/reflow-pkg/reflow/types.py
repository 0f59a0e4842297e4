"""Core data types for the reflow engine."""

from typing import Protocol


class Sink(Protocol):
    """Anything the wrapped output can be written to.

    Only ``write`` is required. Its return value is ignored; raising is how a
    sink reports failure.
    """

    def write(self, data: bytes, /) -> object: ...


class SinkWriteError(OSError):
    """A sink write failed part way through a Writer call.

    ``consumed`` is the number of input bytes processed up to and including
    the character whose output could not be written. The sink's own exception
    is chained as ``__cause__``.
    """

    def __init__(self, consumed: int, cause: BaseException):
        super().__init__(f"sink write failed after {consumed} input bytes: {cause}")
        self.consumed = consumed
