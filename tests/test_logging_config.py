"""Tests for structured logging configuration."""

import json
import logging
import sys

import numpy as np
import pytest

from src.recommender.logging_config import JSONFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after a test reconfigures them."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="src.recommender.models",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_standard_and_extra_fields():
    """Test that extra fields appear next to the standard ones."""
    output = JSONFormatter().format(_record("Fold completed", fold=2, rmse=np.float64(0.9)))
    data = json.loads(output)

    assert data["message"] == "Fold completed"
    assert data["level"] == "INFO"
    assert data["logger"] == "src.recommender.models"
    assert data["fold"] == 2
    assert "rmse" in data
    assert "msg" not in data


def test_json_formatter_includes_exception():
    """Test that exception info is serialized."""
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("failed")
        record.exc_info = sys.exc_info()

    data = json.loads(JSONFormatter().format(record))

    assert "ValueError: boom" in data["exception"]


def test_setup_logging_json(restore_root_logger, capsys):
    """Test that JSON logging writes parseable lines to stdout."""
    setup_logging("DEBUG", json_format=True)
    logging.getLogger("test").debug("hello", extra={"num_items": 3})

    line = capsys.readouterr().out.strip().splitlines()[-1]
    data = json.loads(line)
    assert data["message"] == "hello"
    assert data["num_items"] == 3
    assert restore_root_logger.level == logging.DEBUG


def test_setup_logging_text(restore_root_logger, capsys):
    """Test plain-text logging and level filtering."""
    setup_logging("warning")
    logging.getLogger("test").info("hidden")
    logging.getLogger("test").warning("shown")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "WARNING - shown" in out
