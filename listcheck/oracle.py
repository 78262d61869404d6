"""Equivalence oracle.

Decides whether the reference and the candidate behaved the same for one
operation call. Exceptions are compared by exact type only; messages are
ignored. Return values are compared according to the operation's
``ReturnShape``.
"""

import reprlib
from itertools import count
from typing import Any, Optional

from listcheck.errors import UnequalReturnValuesError
from listcheck.models import Divergence, DivergenceKind
from listcheck.operations import ReturnShape

_repr = reprlib.Repr()
_repr.maxlist = 10
_repr.maxtuple = 10
_repr.maxother = 80

_EXHAUSTED = object()


def describe(value: Any) -> str:
    """Short repr of a value for diagnostics."""
    return _repr.repr(value)


def same_failure_kind(reference_error: BaseException, candidate_error: BaseException) -> bool:
    """True if both exceptions are of exactly the same type."""
    return type(reference_error) is type(candidate_error)


def _value_divergence(message: str, reference_value: Any, candidate_value: Any) -> Divergence:
    reference_repr = describe(reference_value)
    candidate_repr = describe(candidate_value)
    error = UnequalReturnValuesError(
        "%s. reference: %s; candidate: %s", message, reference_repr, candidate_repr
    )
    return Divergence(
        kind=DivergenceKind.VALUE,
        message=str(error),
        returned_same=False,
        error=error,
        reference_value=reference_repr,
        candidate_value=candidate_repr,
    )


def compare_iterators(reference_iter: Any, candidate_iter: Any) -> Optional[Divergence]:
    """Consume two iterators pairwise.

    Equivalent iff every yielded pair is equal and both stop after the same
    number of elements. The reference is finite, so the candidate is never
    advanced more than one element past it.
    """
    reference_iter = iter(reference_iter)
    candidate_iter = iter(candidate_iter)

    for position in count():
        expected = next(reference_iter, _EXHAUSTED)
        actual = next(candidate_iter, _EXHAUSTED)

        if expected is _EXHAUSTED and actual is _EXHAUSTED:
            return None

        if expected is _EXHAUSTED or actual is _EXHAUSTED:
            error = UnequalReturnValuesError("Iterators were different lengths")
            return Divergence(
                kind=DivergenceKind.VALUE,
                message=f"{error} (first {position} elements matched)",
                error=error,
                reference_value="<exhausted>" if expected is _EXHAUSTED else describe(expected),
                candidate_value="<exhausted>" if actual is _EXHAUSTED else describe(actual),
            )

        if expected != actual:
            return _value_divergence(
                f"Iterators contained differing values at position {position}", expected, actual
            )


def compare_returns(
    shape: ReturnShape, reference_value: Any, candidate_value: Any
) -> Optional[Divergence]:
    """Compare two return values of the same operation.

    Args:
        shape: Return shape of the operation
        reference_value: Value returned by the reference
        candidate_value: Value returned by the candidate

    Returns:
        None if equivalent, otherwise a Divergence

    Raises:
        Exception: Whatever the candidate's (or reference's) iterator raises
            while being consumed; the engine reports it as a failure.
    """
    if shape is ReturnShape.OPAQUE:
        return None

    if shape is ReturnShape.LAZY:
        return compare_iterators(reference_value, candidate_value)

    if reference_value is None or candidate_value is None:
        if reference_value is None and candidate_value is None:
            return None
        return _value_divergence("Returned different values", reference_value, candidate_value)

    if shape is ReturnShape.ARRAY:
        if list(reference_value) == list(candidate_value):
            return None
        return _value_divergence("Returned different arrays", reference_value, candidate_value)

    if reference_value == candidate_value:
        return None
    return _value_divergence("Returned different values", reference_value, candidate_value)
