"""Data models for listcheck.

- ``Divergence``: why one operation step failed
- ``StepOutcome``: what the invocation engine observed for one step
- ``Result``: immutable summary of one session run

All models are frozen dataclasses; a ``Result`` is never mutated after a run
returns it.
"""

import traceback
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from listcheck.operations import Operation


class DivergenceKind(str, Enum):
    """Categories of disagreement between reference and candidate.

    Attributes:
        VALUE: Return values differ
        STATE: Contents differ after the operation
        FAILURE: Exception types differ, or one side raised and the other did not
        HARNESS: A harness precondition broke (size desync, empty seeding,
            unsupported parameter type)
    """
    VALUE = "value"
    STATE = "state"
    FAILURE = "failure"
    HARNESS = "harness"


@dataclass(frozen=True)
class Divergence:
    """Diagnostic for a failed step.

    Attributes:
        kind: Category of the divergence
        message: Human-readable summary
        returned_same: Whether the return-value check passed
        state_same: Whether the post-call structural check passed
        error: Underlying exception, if any
        reference_value: repr of the reference's return value
        candidate_value: repr of the candidate's return value
    """
    kind: DivergenceKind
    message: str
    returned_same: bool = False
    state_same: bool = False
    error: Optional[BaseException] = field(default=None, compare=False)
    reference_value: Optional[str] = None
    candidate_value: Optional[str] = None

    @classmethod
    def harness(cls, message: str, error: Optional[BaseException] = None) -> "Divergence":
        """Divergence raised by a broken harness precondition."""
        return cls(
            kind=DivergenceKind.HARNESS,
            message=message,
            returned_same=False,
            state_same=False,
            error=error,
        )

    @property
    def error_type(self) -> Optional[str]:
        return type(self.error).__name__ if self.error is not None else None

    def with_state(self, state_same: bool) -> "Divergence":
        """Copy of this divergence with the structural check result recorded."""
        return replace(self, state_same=state_same)

    def format_error(self) -> Optional[str]:
        """Formatted traceback of the underlying error, if any."""
        if self.error is None:
            return None
        return "".join(traceback.format_exception(type(self.error), self.error, self.error.__traceback__))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "returned_same": self.returned_same,
            "state_same": self.state_same,
            "error_type": self.error_type,
            "error": str(self.error) if self.error is not None else None,
            "reference_value": self.reference_value,
            "candidate_value": self.candidate_value,
        }

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class StepOutcome:
    """Outcome of invoking one operation on both containers."""
    returned_same: bool
    state_same: bool
    divergence: Optional[Divergence] = None

    @property
    def ok(self) -> bool:
        return self.divergence is None


@dataclass(frozen=True)
class Result:
    """Outcome of one session run.

    Attributes:
        seed: Seed that reproduces this run
        reference: Final reference contents
        candidate: Final candidate contents (None if they could not be read)
        failed_on: Operation that diverged, if any
        divergence: Diagnostic, if the run failed
        steps_completed: Number of operations that passed
    """
    seed: int
    reference: Optional[tuple] = None
    candidate: Optional[tuple] = None
    failed_on: Optional[Operation] = None
    divergence: Optional[Divergence] = None
    steps_completed: int = 0

    @property
    def succeeded(self) -> bool:
        return self.divergence is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "seed": self.seed,
            "succeeded": self.succeeded,
            "steps_completed": self.steps_completed,
            "failed_on": self.failed_on.to_dict() if self.failed_on else None,
            "divergence": self.divergence.to_dict() if self.divergence else None,
            "reference_size": len(self.reference) if self.reference is not None else None,
            "candidate_size": len(self.candidate) if self.candidate is not None else None,
        }
