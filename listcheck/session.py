"""Session controller for differential list testing.

A ``ListTestSession`` owns one reference container and one candidate
container, seeds them with identical random content and walks every operation
of the contract once, comparing the two after each call. The first divergence
ends the run (fail-fast) and is returned in the ``Result``.

States::

    FRESH -> RUNNING -> SUCCEEDED -> RUNNING
                     -> FAILED    -> RUNNING   (only with a candidate factory)

Every run starts from empty containers: factory sessions rebuild both, and
instance sessions clear both through ``clear()``. A seed therefore reproduces a
run regardless of what the session ran before. A run left by an exception
(e.g. ``KeyboardInterrupt``) marks the session FAILED.

Example:
    >>> session = ListTestSession(factory=DynamicArray)
    >>> result = session.run(seed=42)
    >>> result.succeeded
    True
"""

import random
import time
from enum import Enum
from typing import Callable, Optional

from listcheck.config import HarnessConfig
from listcheck.containers import ReferenceList
from listcheck.contract import ListContract
from listcheck.engine import InvocationEngine, read_contents
from listcheck.errors import (
    HarnessStateError,
    SessionFailedError,
    UnsupportedParameterError,
)
from listcheck.hooks import AbortHook, log_abort
from listcheck.logging_config import LogContext, get_logger
from listcheck.models import Divergence, DivergenceKind, Result, StepOutcome
from listcheck.operations import Operation, enumerate_operations
from listcheck.synthesis import ArgumentSynthesizer, random_elements

logger = get_logger(__name__)

ContainerFactory = Callable[[], ListContract]


class SessionState(str, Enum):
    """Lifecycle states of a session."""
    FRESH = "fresh"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RunListener:
    """Receives progress events from a session.

    The default implementation only logs. Presentation layers (see
    ``listcheck.cli.reporter``) subclass it and override what they render.
    """

    def run_started(self, seed: int) -> None:
        logger.info(f"Running test {seed}", extra={"seed": seed})

    def step_started(self, operation: Operation) -> None:
        logger.debug(f"Invoking {operation.signature}")

    def step_finished(self, operation: Operation, outcome: StepOutcome) -> None:
        if outcome.ok:
            logger.debug(f"{operation.name}: ok")

    def run_finished(self, result: Result) -> None:
        if result.succeeded:
            logger.info(
                f"Run {result.seed} passed {result.steps_completed} operations",
                extra={"seed": result.seed},
            )
        else:
            logger.warning(
                f"Run {result.seed} failed on {result.failed_on}: {result.divergence}",
                extra={"seed": result.seed},
            )

    def run_aborted(self, seed: int) -> None:
        log_abort(seed)


class ListTestSession:
    """Differential test session for one candidate list implementation.

    Pass either a ready candidate instance or a zero-argument factory. Only a
    session built from a factory can run again after a failed run.

    Args:
        candidate: Candidate instance (no rebuild after failure)
        factory: Zero-argument callable producing fresh candidates
        reference_factory: Zero-argument callable producing the reference
            (default: ReferenceList)
        contract: Contract class whose operations are exercised
        config: Harness configuration (seed lengths, array sizes)
        listener: Receiver of progress events

    Raises:
        ValueError: If neither or both of ``candidate`` and ``factory`` are given
    """

    def __init__(
        self,
        candidate: Optional[ListContract] = None,
        *,
        factory: Optional[ContainerFactory] = None,
        reference_factory: ContainerFactory = ReferenceList,
        contract: type = ListContract,
        config: Optional[HarnessConfig] = None,
        listener: Optional[RunListener] = None,
    ):
        if (candidate is None) == (factory is None):
            raise ValueError("Provide exactly one of a candidate instance or a candidate factory")

        self.factory = factory
        self.reference_factory = reference_factory
        self.contract = contract
        self.config = config or HarnessConfig()
        self.listener = listener or RunListener()

        self.candidate: ListContract = candidate if candidate is not None else factory()
        self.reference: ListContract = reference_factory()

        self.synthesizer = ArgumentSynthesizer(max_array_length=self.config.max_array_length)
        self.engine = InvocationEngine()

        self._rng = random.Random()
        self._seed_source = random.Random()
        self._seed: Optional[int] = None
        self._state = SessionState.FRESH
        self._needs_clear = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def seed(self) -> Optional[int]:
        """Seed of the most recent run."""
        return self._seed

    @property
    def has_failed(self) -> bool:
        return self._state is SessionState.FAILED

    @property
    def operations(self) -> tuple[Operation, ...]:
        return enumerate_operations(self.contract)

    def reset(self) -> None:
        """Rebuild both containers and clear the failure flag.

        Raises:
            SessionFailedError: If the session has no candidate factory
        """
        if self.factory is None:
            raise SessionFailedError(self._seed)
        self.candidate = self.factory()
        self.reference = self.reference_factory()
        self._state = SessionState.FRESH
        self._needs_clear = False
        logger.debug("Session reset with a fresh candidate")

    def run(self, seed: Optional[int] = None) -> Result:
        """Run every operation once against both containers.

        Args:
            seed: Seed for the run; a fresh one is drawn when omitted.
                The same seed always produces the same content and arguments.

        Returns:
            Result of the run. Divergences are reported here, never raised.

        Raises:
            SessionFailedError: If a previous run failed and there is no factory
        """
        if self._state is SessionState.FAILED:
            self.reset()
        elif self._state is SessionState.SUCCEEDED:
            self._recycle()

        if seed is None:
            seed = self._seed_source.getrandbits(63)

        self._seed = seed
        self._rng.seed(seed)
        self._state = SessionState.RUNNING

        with LogContext(operation="run", seed=seed):
            start_time = time.time()
            self.listener.run_started(seed)

            try:
                with AbortHook(seed, self.listener.run_aborted):
                    result = self._run_operations(seed)
            except BaseException:
                self._state = SessionState.FAILED
                raise

            self._state = SessionState.SUCCEEDED if result.succeeded else SessionState.FAILED
            logger.debug(f"Run finished in {time.time() - start_time:.2f}s")
            self.listener.run_finished(result)

        return result

    def _run_operations(self, seed: int) -> Result:
        completed = 0
        for operation in self.operations:
            self.listener.step_started(operation)

            divergence = self._prepare_step()
            if divergence is None:
                try:
                    args = self.synthesizer.synthesize_arguments(
                        operation, self.reference.size(), self._rng
                    )
                except UnsupportedParameterError as e:
                    divergence = Divergence.harness(str(e), error=e)

            if divergence is not None:
                outcome = StepOutcome(returned_same=False, state_same=False, divergence=divergence)
            else:
                outcome = self.engine.invoke(operation, args, self.reference, self.candidate)

            self.listener.step_finished(operation, outcome)

            if not outcome.ok:
                return self._result(seed, completed, operation, outcome.divergence)
            completed += 1

        return self._result(seed, completed)

    def _recycle(self) -> None:
        """Return to empty containers after a passing run."""
        if self.factory is not None:
            self.reset()
        else:
            self._needs_clear = True

    def _prepare_step(self) -> Optional[Divergence]:
        """Re-seed empty containers and verify size parity."""
        try:
            if self._needs_clear:
                self.reference.clear()
                self.candidate.clear()
                self._needs_clear = False

            if self.reference.size() == 0:
                self._seed_contents()

            reference_size = self.reference.size()
            candidate_size = self.candidate.size()
        except Exception as e:
            return Divergence(
                kind=DivergenceKind.FAILURE,
                message=f"{type(e).__name__} raised while preparing containers: {e}",
                error=e,
            )

        if reference_size == 0 or candidate_size == 0:
            error = HarnessStateError("Either size() or append() don't work")
            return Divergence.harness(str(error), error=error)

        if reference_size != candidate_size:
            error = HarnessStateError(
                f"Sizes have become desynced (reference is {reference_size}, "
                f"candidate is {candidate_size})"
            )
            return Divergence.harness(str(error), error=error)

        return None

    def _seed_contents(self) -> None:
        """Fill both containers with the same random values."""
        length = self._rng.randint(self.config.min_seed_length, self.config.max_seed_length)
        values = random_elements(self._rng, length)
        for value in values:
            self.candidate.append(value)
        self.reference.extend(values)
        logger.debug(f"Seeded containers with {length} elements")

    def _result(
        self,
        seed: int,
        completed: int,
        failed_on: Optional[Operation] = None,
        divergence: Optional[Divergence] = None,
    ) -> Result:
        return Result(
            seed=seed,
            reference=self._snapshot(self.reference, "reference"),
            candidate=self._snapshot(self.candidate, "candidate"),
            failed_on=failed_on,
            divergence=divergence,
            steps_completed=completed,
        )

    @staticmethod
    def _snapshot(container: ListContract, label: str) -> Optional[tuple]:
        try:
            return tuple(read_contents(container))
        except Exception:
            logger.warning(f"Could not read final {label} contents", exc_info=True)
            return None
