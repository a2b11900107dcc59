"""
Formatters for structured (JSON) and human-readable console logs.

Both render the ``extra`` fields attached by ContextLogger: JSON under a
``context`` object, console output as a trailing ``[key=value, ...]``.
"""

import json
import logging
import socket
import sys
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord has, plus the ones Formatter.format adds
RESERVED_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """The extra fields a caller attached to record."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in RESERVED_FIELDS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Example output:
        {"timestamp": "2024-05-01T10:00:00+00:00", "level": "INFO",
         "logger": "sqlite_storage.storage", "message": "Loaded 3 rows from users",
         "app": "sqlite-storage", "hostname": "web-1",
         "location": "storage:load:101", "context": {"table_name": "users", "rows": 3}}
    """

    def __init__(self, app_name: str = "sqlite-storage", include_hostname: bool = True):
        super().__init__()
        self.app_name = app_name
        self.hostname = socket.gethostname() if include_hostname else None

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "app": self.app_name,
        }
        if self.hostname:
            payload["hostname"] = self.hostname
        payload["location"] = f"{record.module}:{record.funcName}:{record.lineno}"

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            payload["error"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "stack": self.formatException(record.exc_info),
            }

        context = record_context(record)
        if context:
            payload["context"] = context

        return json.dumps(payload, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Single-line console output; levels are coloured on a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        if color:
            # Handlers share the record; colour a copy
            record = logging.makeLogRecord(vars(record))
            record.levelname = f"{color}{record.levelname}{self.RESET}"

        line = super().format(record)

        context = record_context(record)
        if context:
            line += " [" + ", ".join(f"{key}={value}" for key, value in context.items()) + "]"
        return line
