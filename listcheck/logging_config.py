"""Logging configuration for listcheck.

Provides:
- ``configure_logging()``: human (rich) or JSON output, optional log file
- ``get_logger()``: module loggers under the ``listcheck`` namespace
- ``LogContext``: context manager adding structured fields to every record
  emitted inside it (e.g. the active seed)

Usage:
    from listcheck.logging_config import get_logger, LogContext

    logger = get_logger(__name__)

    with LogContext(operation="run", seed=42):
        logger.info("Starting run")
"""

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "listcheck"

_context_fields: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    "listcheck_log_context", default={}
)

# Attributes present on every LogRecord; anything else came from `extra=`
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


class ContextFilter(logging.Filter):
    """Copy the active LogContext fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _context_fields.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class JSONFormatter(logging.Formatter):
    """Format records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class HumanFormatter(logging.Formatter):
    """Plain text formatter that appends context fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = [
            f"{key}={value}"
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        ]
        if extras:
            message = f"{message} [{' '.join(extras)}]"
        return message


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure the ``listcheck`` logger hierarchy.

    Safe to call more than once; previously installed handlers are replaced.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Emit JSON lines instead of rich console output
        log_file: Optional path of a file that receives every record as well

    Returns:
        The configured root ``listcheck`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if json_output:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JSONFormatter())
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(HumanFormatter("%(message)s"))
    handler.addFilter(ContextFilter())
    logger.addHandler(handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(
            JSONFormatter() if json_output
            else HumanFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        file_handler.addFilter(ContextFilter())
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the ``listcheck`` namespace.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


class LogContext:
    """Attach structured fields to all log records within a block.

    Contexts nest; inner fields override outer ones of the same name.

    Example:
        >>> with LogContext(operation="run", seed=7):
        ...     logger.info("Starting run")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> "LogContext":
        merged = {**_context_fields.get(), **self.fields}
        self._token = _context_fields.set(merged)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._token is not None:
            _context_fields.reset(self._token)
            self._token = None
        return False


def current_context() -> Dict[str, Any]:
    """Fields of the innermost active LogContext."""
    return dict(_context_fields.get())
