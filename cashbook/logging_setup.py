"""
logging_setup.py - Package logger for cashbook

Library modules log through get_logger(__name__) and never attach handlers;
until an entrypoint calls configure_logging() the "cashbook" logger only has a
NullHandler, so embedding applications see nothing unless they opt in.

The CLI calls configure_logging(config.log_level) once per process. The level
itself comes from CashbookConfig (CASHBOOK_LOG_LEVEL).
"""

from __future__ import annotations
from typing import Optional, Union
import logging

PACKAGE_LOGGER = "cashbook"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_handler: Optional[logging.Handler] = None


def _level_number(level: Union[int, str]) -> int:
    """Numeric level for an int or a name such as "debug"; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Send package log records to stderr at the given level.

    Only the first call has an effect; later calls keep the existing handler.

    Args:
        level: Level as int or name ("DEBUG", "INFO", ...)
    """
    global _handler
    if _handler is not None:
        return

    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    numeric = _level_number(level)
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(numeric)
    logger.propagate = False


def reset_logging() -> None:
    """Return the package logger to its unconfigured state."""
    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _handler = None


def get_logger(name: str) -> logging.Logger:
    """Logger for a cashbook module; keeps the package silent until configured."""
    package = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None and not package.handlers:
        package.addHandler(logging.NullHandler())
    return logging.getLogger(name)
