"""Tests for logging configuration and formatters."""

import io
import json
import logging
import sys

import pytest

from prospector.logging import ComponentLoggerAdapter, get_logger
from prospector.logging.config import (
    SERVICE_NAME,
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from prospector.logging.context import log_context


@pytest.fixture
def logger():
    """Create a test logger with no handlers."""
    test_logger = logging.getLogger("test_logger")
    test_logger.setLevel(logging.DEBUG)
    test_logger.handlers.clear()

    yield test_logger

    test_logger.handlers.clear()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after configure_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _key_value_formatter():
    return KeyValueFormatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def test_json_formatter_basic(logger):
    """Test JSONFormatter produces valid JSON with mandatory fields."""
    record = logger.makeRecord("prospector.test", logging.INFO, "test.py", 1, "Test message", (), None)

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Test message"
    assert log_obj["logger"] == "prospector.test"
    assert "name" not in log_obj


def test_json_formatter_with_extra_fields(logger):
    """Test JSONFormatter includes extra fields with their JSON types."""
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Fetched",
        (),
        None,
        extra={"event": "connector.fetch.succeeded", "count": 7, "timed_out": False, "connectors": ["github"]},
    )

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["event"] == "connector.fetch.succeeded"
    assert log_obj["count"] == 7
    assert log_obj["timed_out"] is False
    assert log_obj["connectors"] == ["github"]


def test_json_formatter_includes_exception(logger):
    """Test that exception tracebacks are rendered."""
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logger.makeRecord(
            "test", logging.ERROR, "test.py", 1, "Failed", (), sys.exc_info()
        )

    log_obj = json.loads(JSONFormatter().format(record))

    assert "RuntimeError: boom" in log_obj["exc_info"]


def test_timestamp_format_in_json(logger):
    """Test ISO-8601 timestamps with millisecond precision and Z suffix."""
    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test", (), None)

    timestamp = json.loads(JSONFormatter().format(record))["timestamp"]

    assert timestamp.endswith("Z")
    assert len(timestamp) == 24


def test_contextual_filter_adds_static_and_context_fields(logger):
    """Test that service, environment and context fields are stamped on records."""
    contextual_filter = ContextualFilter(service="test-service", environment="test")

    with log_context(run_id="abc123", connector="github"):
        record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test", (), None)
        contextual_filter.filter(record)

    assert record.service == "test-service"
    assert record.environment == "test"
    assert record.run_id == "abc123"
    assert record.connector == "github"


def test_contextual_filter_explicit_extra_wins(logger):
    """Test that explicit extras take precedence over context fields."""
    contextual_filter = ContextualFilter()

    with log_context(connector="github"):
        record = logger.makeRecord(
            "test", logging.INFO, "test.py", 1, "Test", (), None, extra={"connector": "reddit"}
        )
        contextual_filter.filter(record)

    assert record.connector == "reddit"
    assert record.service == SERVICE_NAME


def test_key_value_formatter_with_extras(logger):
    """Test key=value rendering, quoting and static field omission."""
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Run completed",
        (),
        None,
        extra={
            "event": "aggregation.run.completed",
            "count": 42,
            "had_errors": True,
            "error": "HTTP 503: Service Unavailable",
            "status_code": None,
        },
    )
    ContextualFilter(environment="test").filter(record)

    output = _key_value_formatter().format(record)

    assert "[INFO]" in output
    assert "Run completed" in output
    assert "event=aggregation.run.completed" in output
    assert "count=42" in output
    assert "had_errors=true" in output
    assert 'error="HTTP 503: Service Unavailable"' in output
    assert "status_code=null" in output
    assert "service=" not in output
    assert "environment=" not in output


def test_component_logger_adapter_merges_extras(logger):
    """Test that the component field is added and call extras are kept."""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

    adapter = ComponentLoggerAdapter(logger, {"component": "connector"})
    adapter.info("Fetched", extra={"event": "connector.fetch.succeeded"})

    log_obj = json.loads(stream.getvalue())
    assert log_obj["component"] == "connector"
    assert log_obj["event"] == "connector.fetch.succeeded"


def test_get_logger_without_component():
    """Test that get_logger returns a plain logger without a component."""
    assert isinstance(get_logger("prospector.test"), logging.Logger)
    assert isinstance(get_logger("prospector.test", component="cli"), ComponentLoggerAdapter)


def test_configure_logging_invalid_level():
    """Test configure_logging rejects invalid log level."""
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="INVALID")


def test_configure_logging_invalid_format():
    """Test configure_logging rejects invalid format type."""
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="invalid")


def test_configure_logging_json_format(restore_root_logger):
    """Test configure_logging installs a JSON handler."""
    stream = io.StringIO()
    configure_logging(level="DEBUG", format_type="json", environment="test", stream=stream)

    handler = restore_root_logger.handlers[0]
    assert isinstance(handler.formatter, JSONFormatter)
    assert restore_root_logger.level == logging.DEBUG

    first_line = json.loads(stream.getvalue().splitlines()[0])
    assert first_line["event"] == "logging.configured"
    assert first_line["environment"] == "test"


def test_configure_logging_key_value_format(restore_root_logger):
    """Test configure_logging installs a key-value handler."""
    configure_logging(level="INFO", format_type="key-value", stream=io.StringIO())

    assert isinstance(restore_root_logger.handlers[0].formatter, KeyValueFormatter)


def test_configure_logging_defaults_to_stderr(restore_root_logger, capsys):
    """Test that log output stays off stdout."""
    configure_logging(level="INFO", format_type="json")
    logging.getLogger("prospector.test").info("hello")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "hello" in captured.err


def test_configure_logging_quiets_urllib3(restore_root_logger):
    """Test that urllib3 connection chatter is raised to INFO."""
    configure_logging(level="DEBUG", stream=io.StringIO())

    assert logging.getLogger("urllib3").level == logging.INFO
