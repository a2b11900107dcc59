"""
SQLite connection construction.

Writable connections default to autocommit so every reconciliation
statement is durable as soon as it executes, matching the "no transaction
wrapping" contract of persist. Read-only connections use the ``mode=ro``
URI plus ``query_only`` for defense in depth.

Environment variables (read by ConnectionConfig.from_env):
    SQLITE_STORAGE_BUSY_TIMEOUT_MS: busy_timeout in milliseconds (default 30000)
    SQLITE_STORAGE_AUTOCOMMIT: "1"/"0" (default "1")
    SQLITE_STORAGE_FOREIGN_KEYS: "1"/"0" (default "1")
"""

import logging
import os
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from .utils.tracing import traced

logger = logging.getLogger(__name__)

DEFAULT_BUSY_TIMEOUT_MS = 30_000
MAX_BUSY_TIMEOUT_MS = 10 * 60 * 1000


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ConnectionConfig:
    busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS
    autocommit: bool = True
    foreign_keys: bool = True

    @classmethod
    def from_env(cls) -> "ConnectionConfig":
        raw = os.environ.get("SQLITE_STORAGE_BUSY_TIMEOUT_MS")
        busy_timeout_ms = DEFAULT_BUSY_TIMEOUT_MS
        if raw is not None:
            try:
                busy_timeout_ms = int(raw)
            except ValueError:
                logger.warning(
                    f"Invalid SQLITE_STORAGE_BUSY_TIMEOUT_MS={raw!r}, "
                    f"using default {DEFAULT_BUSY_TIMEOUT_MS}"
                )

        clamped = min(MAX_BUSY_TIMEOUT_MS, max(0, busy_timeout_ms))
        if clamped != busy_timeout_ms:
            logger.warning(f"busy_timeout_ms clamped from {busy_timeout_ms} to {clamped}")

        return cls(
            busy_timeout_ms=clamped,
            autocommit=_env_flag("SQLITE_STORAGE_AUTOCOMMIT", True),
            foreign_keys=_env_flag("SQLITE_STORAGE_FOREIGN_KEYS", True),
        )


@traced("connect", component="connection")
def connect(
    path: str | os.PathLike,
    read_only: bool = False,
    config: ConnectionConfig | None = None,
) -> sqlite3.Connection:
    """
    Open a configured sqlite3 connection.

    Args:
        path: Database file path (":memory:" is accepted for writable connections)
        read_only: Open with mode=ro and query_only
        config: Connection settings (default: ConnectionConfig.from_env())

    Raises:
        ValueError: If path points to a directory
        sqlite3.OperationalError: If the database is missing in read-only mode
    """
    path = os.fspath(path)
    if os.path.isdir(path):
        raise ValueError(f"Path points to a directory, expected file: {path}")

    config = config or ConnectionConfig.from_env()
    isolation_level = None if config.autocommit else ""

    if read_only:
        if not os.path.exists(path):
            raise sqlite3.OperationalError(f"Database not found and read-only access requested: {path}")
        uri = f"{Path(path).resolve().as_uri()}?mode=ro"
        conn = sqlite3.connect(uri, uri=True, isolation_level=isolation_level)
    else:
        conn = sqlite3.connect(path, isolation_level=isolation_level)

    conn.execute(f"PRAGMA busy_timeout={int(config.busy_timeout_ms)}")
    conn.execute(f"PRAGMA foreign_keys={'ON' if config.foreign_keys else 'OFF'}")
    if read_only:
        conn.execute("PRAGMA query_only=ON")

    logger.debug(f"Opened {'read-only' if read_only else 'writable'} connection to {path}")
    return conn
