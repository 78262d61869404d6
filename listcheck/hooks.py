"""Abrupt-termination notice for a running session.

``AbortHook`` is installed around a run's operation loop. If the interpreter
exits while the loop is active, or the loop is left by an exception such as
``KeyboardInterrupt``, it emits a single "run aborted" notice tagged with the
seed so the run can be reproduced. It performs no cleanup and never raises.
"""

import atexit
import contextlib
from typing import Callable, Optional

from listcheck.logging_config import get_logger

logger = get_logger(__name__)


def log_abort(seed: int) -> None:
    logger.warning(f"Aborting run {seed}", extra={"seed": seed})


class AbortHook:
    """Scoped registration of an abort notice.

    Args:
        seed: Seed of the active run
        notify: Callback receiving the seed (default: log a warning)

    Example:
        >>> with AbortHook(seed, reporter.run_aborted):
        ...     run_operations()
    """

    def __init__(self, seed: int, notify: Optional[Callable[[int], None]] = None):
        self.seed = seed
        self.notify = notify or log_abort
        self.fired = False

    def _fire(self) -> None:
        if self.fired:
            return
        self.fired = True
        # The notice is best effort; a failing notifier must not mask the abort.
        with contextlib.suppress(Exception):
            self.notify(self.seed)

    def __enter__(self) -> "AbortHook":
        atexit.register(self._fire)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        atexit.unregister(self._fire)
        if exc_type is not None:
            self._fire()
        return False
