"""Invocation engine: runs one operation on both containers and judges it."""

from typing import Any, Optional, Sequence

from listcheck.contract import ListContract
from listcheck.errors import StateMismatchError
from listcheck.logging_config import get_logger
from listcheck.models import Divergence, DivergenceKind, StepOutcome
from listcheck.operations import Operation
from listcheck.oracle import compare_returns, describe, same_failure_kind

logger = get_logger(__name__)


def fork_arguments(args: Sequence[Any]) -> tuple:
    """Give one side its own copy of mutable (list) arguments.

    Element values are immutable ints, so a shallow copy is enough.
    """
    return tuple(list(arg) if isinstance(arg, list) else arg for arg in args)


def read_contents(container: ListContract) -> list:
    """Full contents of a container, in order."""
    return list(container.iterator())


class InvocationEngine:
    """Invokes operations on the reference and the candidate and compares them.

    A step is ok only when both the return-value check and the post-call
    structural check pass. The structural check always runs, even after the
    return-value check has failed, so the diagnostic reports both.
    """

    def invoke(
        self,
        operation: Operation,
        args: Sequence[Any],
        reference: ListContract,
        candidate: ListContract,
    ) -> StepOutcome:
        """Run ``operation`` with ``args`` on both containers.

        Args:
            operation: Operation to invoke
            args: Synthesized arguments (each side gets its own copy)
            reference: Trusted container
            candidate: Container under test

        Returns:
            StepOutcome describing both checks
        """
        divergence = self._compare_calls(operation, args, reference, candidate)
        returned_same = divergence is None

        state_same, state_divergence = self.check_state(operation, reference, candidate)

        if divergence is not None:
            divergence = divergence.with_state(state_same)
        elif state_divergence is not None:
            divergence = state_divergence

        if divergence is not None:
            logger.debug(
                f"{operation.name} diverged: {divergence.message}",
                extra={"returned_same": returned_same, "state_same": state_same},
            )

        return StepOutcome(
            returned_same=returned_same,
            state_same=state_same,
            divergence=divergence,
        )

    @staticmethod
    def _call(container: ListContract, operation: Operation, args: Sequence[Any]) -> Any:
        return getattr(container, operation.name)(*fork_arguments(args))

    def _compare_calls(
        self,
        operation: Operation,
        args: Sequence[Any],
        reference: ListContract,
        candidate: ListContract,
    ) -> Optional[Divergence]:
        try:
            reference_value = self._call(reference, operation, args)
        except Exception as reference_error:
            return self._compare_failures(operation, args, candidate, reference_error)

        try:
            candidate_value = self._call(candidate, operation, args)
        except Exception as candidate_error:
            return Divergence(
                kind=DivergenceKind.FAILURE,
                message=(
                    f"Candidate raised {type(candidate_error).__name__} from {operation.name}() "
                    f"where the reference returned {describe(reference_value)}: {candidate_error}"
                ),
                error=candidate_error,
                reference_value=describe(reference_value),
            )

        try:
            return compare_returns(operation.return_shape, reference_value, candidate_value)
        except Exception as error:
            return Divergence(
                kind=DivergenceKind.FAILURE,
                message=(
                    f"{type(error).__name__} raised while comparing results of "
                    f"{operation.name}(): {error}"
                ),
                error=error,
            )

    def _compare_failures(
        self,
        operation: Operation,
        args: Sequence[Any],
        candidate: ListContract,
        reference_error: Exception,
    ) -> Optional[Divergence]:
        """The reference raised; the candidate must raise the same exception type."""
        try:
            candidate_value = self._call(candidate, operation, args)
        except Exception as candidate_error:
            if same_failure_kind(reference_error, candidate_error):
                return None
            return Divergence(
                kind=DivergenceKind.FAILURE,
                message=(
                    f"Reference raised {type(reference_error).__name__} from {operation.name}() "
                    f"but the candidate raised {type(candidate_error).__name__}: {candidate_error}"
                ),
                error=candidate_error,
                reference_value=type(reference_error).__name__,
                candidate_value=type(candidate_error).__name__,
            )

        return Divergence(
            kind=DivergenceKind.FAILURE,
            message=(
                f"Reference raised {type(reference_error).__name__} from {operation.name}() "
                f"but the candidate returned {describe(candidate_value)}"
            ),
            error=reference_error,
            reference_value=type(reference_error).__name__,
            candidate_value=describe(candidate_value),
        )

    def check_state(
        self,
        operation: Operation,
        reference: ListContract,
        candidate: ListContract,
    ) -> tuple[bool, Optional[Divergence]]:
        """Compare the full contents of both containers.

        Returns:
            Tuple of (state_same, divergence); divergence is None when equal
        """
        try:
            reference_contents = read_contents(reference)
            candidate_contents = read_contents(candidate)
        except Exception as error:
            return False, Divergence(
                kind=DivergenceKind.FAILURE,
                message=(
                    f"{type(error).__name__} raised while reading contents after "
                    f"{operation.name}(): {error}"
                ),
                returned_same=True,
                error=error,
            )

        if reference_contents == candidate_contents:
            return True, None

        error = StateMismatchError(
            f"reference is not equal to candidate after {operation.name}() "
            f"(reference size {len(reference_contents)}, candidate size {len(candidate_contents)})"
        )
        return False, Divergence(
            kind=DivergenceKind.STATE,
            message=str(error),
            returned_same=True,
            error=error,
            reference_value=describe(reference_contents),
            candidate_value=describe(candidate_contents),
        )
