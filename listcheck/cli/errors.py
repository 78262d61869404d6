"""CLI error handling with user-friendly messages.

Stack traces are hidden by default but shown with --log-level DEBUG.
"""

import functools
from dataclasses import dataclass
from typing import Callable, Optional, ParamSpec, TypeVar

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from listcheck.config import ConfigError as ConfigLoadError
from listcheck.errors import SessionFailedError
from listcheck.logging_config import get_logger
from listcheck.validation import ValidationError

logger = get_logger(__name__)
console = Console(stderr=True)

P = ParamSpec("P")
R = TypeVar("R")


@dataclass
class CLIError(Exception):
    """Base CLI error with user-friendly messaging."""

    message: str
    hint: Optional[str] = None
    fix: Optional[str] = None
    show_traceback: bool = False

    def __str__(self) -> str:
        return self.message


@dataclass
class TargetError(CLIError):
    """The list implementation to test could not be loaded or built."""

    message: str = "Could not load the target implementation"
    hint: str = "The import path must name a class or zero-argument factory."
    fix: str = "listcheck run mypackage.lists:MyList"


@dataclass
class ConfigError(CLIError):
    """Configuration errors."""

    message: str = "Configuration error"
    hint: str = "Your configuration file may be invalid."
    fix: str = "listcheck config --template yaml > .listcheckrc"


@dataclass
class SessionError(CLIError):
    """A session was used after it failed."""

    message: str = "Session cannot run again"
    hint: str = "A failed session can only be re-run when built from a factory."
    fix: str = "Pass a class or factory as TARGET instead of an instance."


@dataclass
class ResourceError(CLIError):
    """Resource exhaustion (memory, recursion)."""

    message: str = "Resource limit exceeded"
    hint: str = "The run ran out of memory or recursion depth."
    fix: str = "Lower harness.max_seed_length in your configuration."


# Error classification rules: (pattern, error_class, custom_message)
ERROR_PATTERNS: list[tuple[str, type[CLIError], Optional[str]]] = [
    ("no module named", TargetError, None),
    ("takes no arguments", TargetError, "Target cannot be built without arguments"),
    ("missing 1 required positional argument", TargetError, "Target cannot be built without arguments"),
    ("can't instantiate abstract class", TargetError, "Target does not implement every list operation"),
    ("memoryerror", ResourceError, "Out of memory"),
    ("recursion", ResourceError, "Maximum recursion depth exceeded"),
]


def classify_error(error: Exception) -> CLIError:
    """Classify an exception into a user-friendly CLIError.

    Args:
        error: The original exception

    Returns:
        A CLIError with helpful messaging
    """
    if isinstance(error, CLIError):
        return error

    if isinstance(error, ValidationError):
        return CLIError(message=error.message, hint=error.suggestion)

    if isinstance(error, ConfigLoadError):
        return ConfigError(message=str(error))

    if isinstance(error, SessionFailedError):
        return SessionError(message=str(error))

    error_str = str(error).lower()
    error_type = type(error).__name__

    for pattern, error_class, custom_msg in ERROR_PATTERNS:
        if pattern in error_str or pattern in error_type.lower():
            return error_class(message=custom_msg or str(error))

    return CLIError(
        message=str(error)[:300],
        hint="An unexpected error occurred.",
        fix="Run with --log-level DEBUG for more details, or report this issue.",
    )


def format_error(error: CLIError) -> Panel:
    """Format a CLIError as a rich Panel."""
    content = Text()

    content.append(error.message, style="bold")
    content.append("\n")

    if error.hint:
        content.append("\n")
        content.append(error.hint, style="dim")

    if error.fix:
        content.append("\n\n")
        content.append("Fix: ", style="green bold")
        content.append(error.fix, style="cyan")

    return Panel(
        content,
        title="[red bold]Error[/red bold]",
        border_style="red",
        padding=(1, 2),
    )


def print_error(error: Exception, verbose: bool = False) -> None:
    """Print an error panel, with the traceback when verbose.

    Args:
        error: The exception to print
        verbose: Show full traceback
    """
    cli_error = classify_error(error)

    logger.debug(f"CLI error: {error}", exc_info=True)

    console.print()
    console.print(format_error(cli_error))

    if verbose or cli_error.show_traceback:
        console.print("\n[dim]Traceback (for debugging):[/dim]")
        console.print_exception(show_locals=False)


def handle_errors() -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator for CLI commands that provides friendly error handling.

    Usage:
        @cli.command()
        @handle_errors()
        def my_command():
            ...
    """
    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            ctx = click.get_current_context(silent=True)
            verbose = False
            if ctx:
                root = ctx.find_root()
                verbose = (root.params.get("log_level") or "").upper() == "DEBUG"

            try:
                return func(*args, **kwargs)
            except (click.Abort, click.exceptions.Exit, click.ClickException):
                raise
            except KeyboardInterrupt:
                console.print("\n[yellow]Interrupted[/yellow]")
                raise click.Abort()
            except Exception as e:
                print_error(e, verbose=verbose)
                raise click.Abort()

        return wrapper
    return decorator
