"""
Differential properties of complete sessions.

Properties verified:
- Reproducibility: same seed, same outcome
- Symmetry: swapping reference and candidate roles changes nothing
- Fail-fast: exactly one failing operation, nothing attempted after it
- Known-broken candidates are caught on the right operation
"""

from hypothesis import given, strategies as st

from listcheck.config import HarnessConfig
from listcheck.containers import DynamicArray, ReferenceList
from listcheck.models import DivergenceKind
from listcheck.operations import enumerate_operations
from listcheck.session import ListTestSession, RunListener
from tests.fixtures.candidates import (
    NonShiftingPopArray,
    ShortSizeArray,
    WrongExceptionArray,
)

seeds = st.integers(min_value=0, max_value=2 ** 63 - 1)

OPERATION_NAMES = [op.name for op in enumerate_operations()]


class StepCounter(RunListener):
    """Records which operations were started."""

    def __init__(self):
        self.started = []

    def step_started(self, operation):
        self.started.append(operation.name)


def run_once(factory, seed, harness, reference_factory=ReferenceList, listener=None):
    session = ListTestSession(
        factory=factory,
        reference_factory=reference_factory,
        config=harness,
        listener=listener,
    )
    return session.run(seed)


class TestReproducibility:
    """Same seed and equivalent candidates give the same result."""

    @given(seed=seeds)
    def test_same_seed_same_result(self, session_harness, seed):
        first = run_once(DynamicArray, seed, session_harness)
        second = run_once(DynamicArray, seed, session_harness)

        assert first.succeeded == second.succeeded
        assert first.failed_on == second.failed_on
        assert first.reference == second.reference
        assert first.candidate == second.candidate

    @given(seed=seeds)
    def test_same_seed_same_failure(self, session_harness, seed):
        first = run_once(NonShiftingPopArray, seed, session_harness)
        second = run_once(NonShiftingPopArray, seed, session_harness)

        assert first.failed_on == second.failed_on
        assert first.divergence == second.divergence
        assert first.candidate == second.candidate

    @given(seed=seeds)
    def test_rerun_with_factory_matches_fresh_session(self, session_harness, seed):
        session = ListTestSession(factory=ShortSizeArray, config=session_harness)
        session.run(seed)
        rerun = session.run(seed)

        fresh = run_once(ShortSizeArray, seed, session_harness)

        assert rerun.failed_on == fresh.failed_on
        assert rerun.divergence == fresh.divergence


    @given(first=seeds, second=seeds)
    def test_earlier_runs_do_not_leak_into_later_ones(self, session_harness, first, second):
        batch = ListTestSession(factory=NonShiftingPopArray, config=session_harness)
        batch.run(first)
        reused = batch.run(second)

        fresh = run_once(NonShiftingPopArray, second, session_harness)

        assert reused.succeeded == fresh.succeeded
        assert reused.failed_on == fresh.failed_on
        assert reused.reference == fresh.reference
        assert reused.candidate == fresh.candidate


class TestSymmetry:
    """Swapping roles of behaviorally identical implementations."""

    @given(seed=seeds)
    def test_swapped_roles(self, session_harness, seed):
        forward = run_once(DynamicArray, seed, session_harness, reference_factory=ReferenceList)
        backward = run_once(ReferenceList, seed, session_harness, reference_factory=DynamicArray)

        assert forward.succeeded and backward.succeeded
        assert forward.steps_completed == backward.steps_completed
        assert forward.reference == backward.candidate
        assert forward.candidate == backward.reference


class TestFailFast:
    """The first divergence ends the run."""

    @given(seed=seeds)
    def test_nothing_attempted_after_failure(self, session_harness, seed):
        listener = StepCounter()
        result = run_once(NonShiftingPopArray, seed, session_harness, listener=listener)

        if result.succeeded:
            assert listener.started == OPERATION_NAMES
        else:
            assert listener.started[-1] == result.failed_on.name
            assert len(listener.started) == result.steps_completed + 1
            assert listener.started == OPERATION_NAMES[: result.steps_completed + 1]


class TestScenarios:
    """Known implementations and known bugs."""

    @given(seed=seeds)
    def test_correct_candidate_passes_every_operation(self, session_harness, seed):
        result = run_once(DynamicArray, seed, session_harness)

        assert result.succeeded
        assert result.divergence is None
        assert result.steps_completed == len(OPERATION_NAMES)
        assert result.reference == result.candidate

    def test_correct_candidate_with_default_sizes(self):
        result = run_once(DynamicArray, 20240101, HarnessConfig())
        assert result.succeeded

    @given(seed=seeds)
    def test_size_off_by_one_fails_first_operation(self, seed):
        harness = HarnessConfig(min_seed_length=2, max_seed_length=60)
        result = run_once(ShortSizeArray, seed, harness)

        assert not result.succeeded
        assert result.failed_on.name == OPERATION_NAMES[0]
        assert result.steps_completed == 0
        assert result.divergence.kind is DivergenceKind.HARNESS
        assert "desynced" in result.divergence.message

    @given(seed=seeds)
    def test_non_shifting_pop_is_a_state_divergence(self, session_harness, seed):
        result = run_once(NonShiftingPopArray, seed, session_harness)

        # pop() of the last element needs no shifting, so such runs pass
        if not result.succeeded:
            assert result.failed_on.name == "pop"
            assert result.divergence.kind is DivergenceKind.STATE
            assert result.divergence.returned_same is True
            assert result.divergence.state_same is False

    def test_non_shifting_pop_is_caught(self):
        harness = HarnessConfig(min_seed_length=100, max_seed_length=200)
        results = [run_once(NonShiftingPopArray, seed, harness) for seed in range(5)]

        assert any(not result.succeeded for result in results)

    @given(seed=seeds)
    def test_wrong_exception_type_never_passes_silently(self, session_harness, seed):
        result = run_once(WrongExceptionArray, seed, session_harness)

        if not result.succeeded:
            assert result.failed_on.name == "sub_list"
            assert result.divergence.kind is DivergenceKind.FAILURE
            assert result.divergence.reference_value == "ValueError"
            assert result.divergence.candidate_value == "KeyError"

    def test_wrong_exception_type_is_caught(self, session_harness):
        results = [run_once(WrongExceptionArray, seed, session_harness) for seed in range(30)]

        assert any(not result.succeeded for result in results)
