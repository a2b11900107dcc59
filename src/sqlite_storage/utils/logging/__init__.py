"""
Structured logging for sqlite-storage.

Provides JSON or coloured console output plus ContextLogger, which the
stores use to tag every record with their table.

Usage:
    from sqlite_storage.utils.logging import setup_logging, get_logger

    # Once at application startup
    setup_logging(level="INFO", json_format=True)

    logger = get_logger(__name__)
    logger.info("Loaded table", extra={"table_name": "customers", "rows": 120})
"""

from .config import (
    LoggingConfig,
    configure_from_env,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from .context import ContextLogger
from .formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "LoggingConfig",
    "setup_logging",
    "get_logger",
    "configure_from_env",
    "shutdown_logging",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
