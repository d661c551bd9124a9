"""
test_logging_setup.py - Unit tests for package logging configuration
"""

import logging

from cashbook import load_config
from cashbook.logging_setup import configure_logging, get_logger


def _pkg_logger():
    return logging.getLogger("cashbook")


def test_library_logger_is_silent_until_configured():
    get_logger("cashbook.replay")
    handlers = _pkg_logger().handlers
    assert handlers and all(isinstance(h, logging.NullHandler) for h in handlers)


def test_configure_logging_writes_to_stderr(capsys):
    configure_logging("DEBUG")
    get_logger("cashbook.replay").debug("replayed %d rows", 3)
    err = capsys.readouterr().err
    assert "cashbook.replay DEBUG replayed 3 rows" in err


def test_configure_logging_runs_once():
    configure_logging("INFO")
    configure_logging("DEBUG")
    assert len(_pkg_logger().handlers) == 1
    assert _pkg_logger().level == logging.INFO


def test_level_from_config(monkeypatch):
    monkeypatch.setenv("CASHBOOK_LOG_LEVEL", "warning")
    configure_logging(load_config().log_level)
    assert _pkg_logger().level == logging.WARNING


def test_numeric_level():
    configure_logging("10")
    assert _pkg_logger().level == logging.DEBUG


def test_unknown_level_falls_back_to_info():
    configure_logging("chatty")
    assert _pkg_logger().level == logging.INFO
