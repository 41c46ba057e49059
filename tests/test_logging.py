"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers

import pytest

from streaksage.logging_config import JSONFormatter, get_logger, setup_logging


def test_json_formatter():
    """Test that JSONFormatter correctly formats log records."""
    formatter = JSONFormatter()

    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Streak closed",
        args=(),
        exc_info=None,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    record.habit_id = 7

    log_data = json.loads(formatter.format(record))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Streak closed"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert log_data["extra"] == {"habit_id": 7}
    assert "timestamp" in log_data


def test_json_formatter_with_exception():
    """Test that JSONFormatter correctly handles exceptions."""
    formatter = JSONFormatter()

    try:
        raise ValueError("Unknown cadence")
    except ValueError:
        import sys

        exc_info = sys.exc_info()

    record = logging.LogRecord(
        name="test.logger",
        level=logging.ERROR,
        pathname="test.py",
        lineno=42,
        msg="Malformed cadence",
        args=(),
        exc_info=exc_info,
    )

    log_data = json.loads(formatter.format(record))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Unknown cadence" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_setup_logging(config, tmp_path):
    """Test that logging setup creates a rotating JSON log file."""
    logger = setup_logging(config)

    assert logger.name == "streaksage"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "streaksage.log"
    assert log_file.exists()

    get_logger("tests").warning("Habit skipped", extra={"habit_id": 3})

    lines = [line for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    assert len(lines) >= 2
    entries = [json.loads(line) for line in lines]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["logger"] == "streaksage.tests"
    assert entries[-1]["extra"]["habit_id"] == 3


def test_setup_logging_twice_does_not_duplicate_handlers(config):
    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2


def test_get_logger():
    """Test that get_logger returns properly namespaced loggers."""
    logger1 = get_logger("services.streaks")
    logger2 = get_logger("services.trends")

    assert logger1.name == "streaksage.services.streaks"
    assert logger2.name == "streaksage.services.trends"
    assert logger1 != logger2


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(config, dev_mode):
    """Test that console logging level adjusts based on dev mode."""
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    assert console_handler.level == (logging.INFO if dev_mode else logging.WARNING)
    assert logger.level == (logging.DEBUG if dev_mode else logging.INFO)
