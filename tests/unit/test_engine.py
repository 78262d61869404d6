"""Unit tests for the invocation engine."""

import pytest

from listcheck.containers import DynamicArray, ReferenceList
from listcheck.engine import InvocationEngine, fork_arguments, read_contents
from listcheck.errors import StateMismatchError
from listcheck.models import DivergenceKind
from listcheck.operations import find_operation
from tests.fixtures.candidates import (
    ExplodingSortArray,
    NonShiftingPopArray,
    OffByOneIndexOfArray,
    WrongExceptionArray,
)


def filled(factory, values):
    container = factory()
    container.extend(values)
    return container


@pytest.fixture
def engine():
    return InvocationEngine()


class TestAgreement:
    """Matching implementations pass every check."""

    def test_matching_call(self, engine):
        reference = filled(ReferenceList, [1, 2, 3])
        candidate = filled(DynamicArray, [1, 2, 3])

        outcome = engine.invoke(find_operation("insert"), (1, 9), reference, candidate)

        assert outcome.ok
        assert outcome.returned_same and outcome.state_same
        assert read_contents(candidate) == [1, 9, 2, 3]

    def test_matching_exceptions(self, engine):
        reference = filled(ReferenceList, [1, 2, 3])
        candidate = filled(DynamicArray, [1, 2, 3])

        outcome = engine.invoke(find_operation("get"), (3,), reference, candidate)

        assert outcome.ok

    def test_arguments_are_forked(self, engine):
        reference = filled(ReferenceList, [1, 2])
        candidate = filled(DynamicArray, [1, 2])
        array = [None] * 5

        outcome = engine.invoke(find_operation("to_array_into"), (array,), reference, candidate)

        assert outcome.ok
        # Neither side wrote into the caller's array
        assert array == [None] * 5

    def test_iterators_compared_lazily(self, engine):
        reference = filled(ReferenceList, [4, 5, 6])
        candidate = filled(DynamicArray, [4, 5, 6])

        outcome = engine.invoke(find_operation("list_iterator_from"), (1,), reference, candidate)

        assert outcome.ok


class TestDivergences:
    """Each kind of disagreement is reported, never raised."""

    def test_value_divergence(self, engine):
        reference = filled(ReferenceList, [7, 8])
        candidate = filled(OffByOneIndexOfArray, [7, 8])

        outcome = engine.invoke(find_operation("index_of"), (8,), reference, candidate)

        assert not outcome.ok
        assert outcome.returned_same is False
        assert outcome.state_same is True
        assert outcome.divergence.kind is DivergenceKind.VALUE
        assert outcome.divergence.reference_value == "1"
        assert outcome.divergence.candidate_value == "2"
        assert outcome.divergence.state_same is True

    def test_state_divergence_when_return_matches(self, engine):
        reference = filled(ReferenceList, [10, 20, 30, 40])
        candidate = filled(NonShiftingPopArray, [10, 20, 30, 40])

        outcome = engine.invoke(find_operation("pop"), (0,), reference, candidate)

        assert outcome.returned_same is True
        assert outcome.state_same is False
        assert outcome.divergence.kind is DivergenceKind.STATE
        assert isinstance(outcome.divergence.error, StateMismatchError)
        assert "pop()" in outcome.divergence.message

    def test_different_exception_type(self, engine):
        reference = filled(ReferenceList, [1, 2, 3])
        candidate = filled(WrongExceptionArray, [1, 2, 3])

        outcome = engine.invoke(find_operation("get"), (5,), reference, candidate)

        assert outcome.divergence.kind is DivergenceKind.FAILURE
        assert outcome.divergence.reference_value == "IndexError"
        assert outcome.divergence.candidate_value == "KeyError"

    def test_reference_raises_candidate_returns(self, engine):
        reference = filled(ReferenceList, [1, 2, 3])
        candidate = filled(DynamicArray, [1, 2, 3, 4])

        outcome = engine.invoke(find_operation("get"), (3,), reference, candidate)

        assert outcome.divergence.kind is DivergenceKind.FAILURE
        assert "candidate returned 4" in outcome.divergence.message
        assert outcome.state_same is False

    def test_candidate_raises_reference_returns(self, engine):
        reference = filled(ReferenceList, [3, 1, 2])
        candidate = filled(ExplodingSortArray, [3, 1, 2])

        outcome = engine.invoke(find_operation("sort"), (lambda a, b: (a > b) - (a < b),),
                                reference, candidate)

        divergence = outcome.divergence
        assert divergence.kind is DivergenceKind.FAILURE
        assert isinstance(divergence.error, RuntimeError)
        assert divergence.error_type == "RuntimeError"
        assert "Candidate raised RuntimeError from sort()" in divergence.message
        # The reference sorted, the candidate did not
        assert outcome.state_same is False

    def test_state_checked_after_value_divergence(self, engine):
        reference = filled(ReferenceList, [1, 2])
        candidate = filled(DynamicArray, [1, 2, 3])

        outcome = engine.invoke(find_operation("size"), (), reference, candidate)

        assert outcome.returned_same is False
        assert outcome.state_same is False
        assert outcome.divergence.kind is DivergenceKind.VALUE
        assert outcome.divergence.state_same is False


def test_check_state_reports_sizes(engine):
    state_same, divergence = engine.check_state(
        find_operation("clear"), filled(ReferenceList, [1]), filled(DynamicArray, [])
    )
    assert state_same is False
    assert "reference size 1, candidate size 0" in divergence.message


def test_fork_arguments_copies_lists_only():
    values = [1, 2]
    forked = fork_arguments((values, 3, None))
    assert forked == ([1, 2], 3, None)
    assert forked[0] is not values
