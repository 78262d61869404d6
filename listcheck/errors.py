"""Exception types raised or reported by the harness.

Divergences between the reference and the candidate are never raised to the
caller; they are returned inside a ``Result``. The exceptions below are either
carried as the underlying error of a divergence (``UnequalReturnValuesError``,
``StateMismatchError``, ``HarnessStateError``) or raised for API misuse
(``SessionFailedError``).
"""

from typing import Any, Optional


class ListCheckError(Exception):
    """Base class for all listcheck errors."""
    pass


class SessionFailedError(ListCheckError):
    """Raised when a failed session without a factory is run again."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        message = "Session has already failed and has no factory to rebuild the candidate"
        if seed is not None:
            message += f" (failed run seed: {seed})"
        super().__init__(message)


class UnsupportedParameterError(ListCheckError):
    """Raised when an operation declares a parameter no generator can satisfy."""

    def __init__(self, operation: str, parameter: str, annotation: Any):
        self.operation = operation
        self.parameter = parameter
        self.annotation = annotation
        super().__init__(
            f"Cannot synthesize argument '{parameter}' of {operation}(): "
            f"unsupported parameter type {annotation!r}"
        )


class UnequalReturnValuesError(ListCheckError):
    """Reference and candidate returned different values."""

    def __init__(self, message: str, *format_args: Any):
        self.message = message % format_args if format_args else message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class StateMismatchError(ListCheckError):
    """Reference and candidate contents differ after an operation."""
    pass


class HarnessStateError(ListCheckError):
    """A harness precondition broke (size desync, empty seeding)."""
    pass
