"""Input validation utilities with helpful error messages."""

import importlib
import os
import re
from pathlib import Path
from typing import Any, Callable, Optional

from listcheck.logging_config import get_logger

logger = get_logger(__name__)

_IMPORT_PATH = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$")


class ValidationError(Exception):
    """Raised when input validation fails.

    This exception includes helpful error messages and suggestions for fixing the issue.
    """
    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        full_message = message
        if suggestion:
            full_message += f"\n\nSuggestion: {suggestion}"
        super().__init__(full_message)


def validate_target(import_path: str) -> Callable[[], Any]:
    """Resolve a ``module:attribute`` import path to a container factory.

    Args:
        import_path: Import path, e.g. ``listcheck.containers:DynamicArray``

    Returns:
        The imported zero-argument callable

    Raises:
        ValidationError: If the path is malformed, cannot be imported, or
            does not name a callable
    """
    if not import_path or not import_path.strip():
        raise ValidationError(
            "Target cannot be empty",
            "Use module:attribute, e.g. listcheck.containers:DynamicArray"
        )

    import_path = import_path.strip()
    if not _IMPORT_PATH.match(import_path):
        raise ValidationError(
            f"Invalid target format: {import_path}",
            "Use module:attribute, e.g. mypackage.lists:MyList"
        )

    module_name, _, attribute = import_path.partition(":")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValidationError(
            f"Cannot import module '{module_name}': {e}",
            "Check the module name and make sure it is importable from the current directory"
        )

    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise ValidationError(
                f"Module '{module_name}' has no attribute '{attribute}'",
                f"Check the spelling. Available names: "
                f"{', '.join(name for name in dir(module) if not name.startswith('_'))[:200]}"
            )

    if not callable(target):
        raise ValidationError(
            f"Target is not callable: {import_path}",
            "Point at a class or a zero-argument factory function"
        )

    logger.debug(f"Resolved target {import_path} to {target!r}")
    return target


def validate_runs(runs: int) -> int:
    """Validate the number of runs.

    Raises:
        ValidationError: If runs is not positive
    """
    if runs <= 0:
        raise ValidationError(
            f"Number of runs must be positive: {runs}",
            "Use a positive integer, e.g., --runs 10"
        )

    if runs > 10_000:
        logger.warning(f"{runs} runs requested; this may take a long time")

    return runs


def validate_seed(seed: Optional[int]) -> Optional[int]:
    """Validate an explicit run seed.

    Raises:
        ValidationError: If the seed is negative
    """
    if seed is not None and seed < 0:
        raise ValidationError(
            f"Seed must not be negative: {seed}",
            "Use the seed printed by a previous run, e.g., --seed 1234567"
        )

    return seed


def validate_seed_lengths(min_length: int, max_length: int) -> tuple[int, int]:
    """Validate the range of initial content lengths.

    Returns:
        Validated (min_length, max_length)

    Raises:
        ValidationError: If the range is empty or contains zero
    """
    if min_length < 1:
        raise ValidationError(
            f"Minimum seed length must be at least 1: {min_length}",
            "Containers are seeded with at least one element so index arguments have a range"
        )

    if max_length < min_length:
        raise ValidationError(
            f"Maximum seed length ({max_length}) is smaller than the minimum ({min_length})",
            "Swap the values or raise the maximum"
        )

    return min_length, max_length


def validate_output_path(output_path: str) -> Path:
    """Validate output file path is writable.

    Args:
        output_path: Path to output file

    Returns:
        Validated Path object

    Raises:
        ValidationError: If path is not writable
    """
    if not output_path or not output_path.strip():
        raise ValidationError(
            "Output path cannot be empty",
            "Provide a valid output file path, e.g., results.json"
        )

    path = Path(output_path).expanduser()
    parent = path.parent

    if not parent.exists():
        raise ValidationError(
            f"Output directory does not exist: {parent}",
            f"Create the directory first: mkdir -p {parent}"
        )

    if not parent.is_dir():
        raise ValidationError(
            f"Output parent path is not a directory: {parent}",
            "Provide a path where the parent is a directory"
        )

    if not os.access(parent, os.W_OK):
        raise ValidationError(
            f"Output directory is not writable: {parent}",
            f"Check permissions. Try: chmod +w {parent}"
        )

    if path.exists():
        if path.is_dir():
            raise ValidationError(
                f"Output path is a directory, not a file: {output_path}",
                "Provide a file path, not a directory"
            )

        if not os.access(path, os.W_OK):
            raise ValidationError(
                f"Output file exists but is not writable: {output_path}",
                f"Check permissions. Try: chmod +w {output_path}"
            )

    return path
