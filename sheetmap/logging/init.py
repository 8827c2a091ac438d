from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from ..models.enums import MessageLevel

if TYPE_CHECKING:
    from ..models.message import Message

"""Logging for the CLI: one ``sheetmap`` logger writing labeled lines to stdout.

A line starts with its label (DEBUG, INFO, WARN, ERROR or SUMMARY) followed by
the message. Diagnostic ``Message`` values returned by the manager are logged
through ``log_message`` so their level picks the label and their category
leads the text. Library modules log through child loggers and never print.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "get_logger",
    "log_message",
    "log_summary",
    "reset_logging",
    "setup_logging",
]

LOGGER_NAME = "sheetmap"

# Between INFO=20 and WARNING=30
SUMMARY_LEVEL = 25

_MESSAGE_LEVELS = {
    MessageLevel.INFO.value: logging.INFO,
    MessageLevel.WARNING.value: logging.WARNING,
    MessageLevel.ERROR.value: logging.ERROR,
}

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        return f"{self.LEVEL_LABELS.get(record.levelno, record.levelname)} {record.getMessage()}"


def setup_logging(level: int | None = None) -> logging.Logger:
    """Return the ``sheetmap`` logger, attaching its stdout handler on first use.

    ``level`` (INFO when the logger is new) is applied to the logger and its
    handler on every call, so ``setup_logging(logging.DEBUG)`` after start-up
    turns on debug output without adding a second handler.
    """
    global _logger

    if _logger is None:
        logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
        logger = logging.getLogger(LOGGER_NAME)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(LabeledFormatter())
        logger.addHandler(handler)
        logger.propagate = False
        _logger = logger
        level = logging.INFO if level is None else level

    if level is not None:
        _logger.setLevel(level)
        for handler in _logger.handlers:
            handler.setLevel(level)
    return _logger


def get_logger() -> logging.Logger:
    return setup_logging()


def log_message(message: Message) -> None:
    """Log a diagnostic message as ``[<type>] <text>`` at its own level."""
    level = _MESSAGE_LEVELS.get(message.level, logging.INFO)
    get_logger().log(level, f"[{message.type}] {message.message}")


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger. Mainly for tests."""
    global _logger
    if _logger is not None:
        for handler in _logger.handlers[:]:
            _logger.removeHandler(handler)
        _logger.propagate = True
        _logger.setLevel(logging.NOTSET)
    _logger = None
