"""Board logging: one JSON object per line, to stdout and optionally a daily file."""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from logging.handlers import TimedRotatingFileHandler
from typing import Any

ROOT_LOGGER_NAME = "kanban_board"
LOG_FILE_NAME = "board.log"

VALID_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# Attributes every record carries; whatever else is on a record came from ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line, with caller context under "extra"."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        if context:
            entry["extra"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _dated_name(default_name: str) -> str:
    # board.log.2026-10-18 -> board-2026-10-18.log
    base, _, day = default_name.rpartition(".log.")
    return f"{base}-{day}.log" if day else default_name


class DailyRotatingFileHandler(TimedRotatingFileHandler):
    """Write to ``<directory>/board.log``; at UTC midnight the day's file is kept as board-<date>.log."""

    def __init__(self, directory: str) -> None:
        os.makedirs(directory, exist_ok=True)
        super().__init__(os.path.join(directory, LOG_FILE_NAME), when="midnight", utc=True, encoding="utf-8")
        self.namer = _dated_name


def setup_logging(level: str, log_directory: str | None = None) -> logging.Logger:
    """
    Point the package logger at stdout, plus a daily file when ``log_directory`` is set.

    Calling it again replaces the handlers from the previous call.

    Raises:
        ValueError: If ``level`` is not a standard level name.
    """
    name = level.upper()
    if name not in VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of {sorted(VALID_LOG_LEVELS)}")

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_directory is not None:
        handlers.append(DailyRotatingFileHandler(log_directory))

    formatter = JSONFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(name)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name`` inside the package namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
