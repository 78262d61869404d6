"""Unit tests for logging configuration."""

import json
import logging

from rich.logging import RichHandler

from listcheck.logging_config import (
    JSONFormatter,
    LogContext,
    configure_logging,
    current_context,
    get_logger,
)


def test_get_logger_namespaces_names():
    assert get_logger("listcheck.session").name == "listcheck.session"
    assert get_logger("my_plugin").name == "listcheck.my_plugin"


def test_human_output_uses_rich():
    logger = configure_logging(level="debug")
    assert logger.level == logging.DEBUG
    assert any(isinstance(h, RichHandler) for h in logger.handlers)


def test_reconfigure_replaces_handlers():
    configure_logging()
    logger = configure_logging(json_output=True)
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JSONFormatter)


def test_log_file_receives_records(tmp_path):
    log_file = tmp_path / "logs" / "run.log"
    configure_logging(level="INFO", json_output=True, log_file=str(log_file))

    with LogContext(seed=17):
        get_logger("listcheck.test").info("hello")

    for handler in logging.getLogger("listcheck").handlers:
        handler.flush()

    record = json.loads(log_file.read_text().strip().splitlines()[-1])
    assert record["message"] == "hello"
    assert record["seed"] == 17
    assert record["level"] == "INFO"


def test_log_context_nests_and_restores():
    assert current_context() == {}
    with LogContext(operation="run", seed=1):
        with LogContext(seed=2):
            assert current_context() == {"operation": "run", "seed": 2}
        assert current_context() == {"operation": "run", "seed": 1}
    assert current_context() == {}


def test_json_formatter_includes_extras():
    record = logging.LogRecord("listcheck.x", logging.WARNING, __file__, 1, "diverged", (), None)
    record.returned_same = False
    payload = json.loads(JSONFormatter().format(record))
    assert payload["returned_same"] is False
    assert payload["logger"] == "listcheck.x"
