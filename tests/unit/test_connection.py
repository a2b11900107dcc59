"""
Unit tests for sqlite_storage.connection
"""

import sqlite3
from unittest.mock import patch

import pytest

from sqlite_storage.connection import (
    DEFAULT_BUSY_TIMEOUT_MS,
    MAX_BUSY_TIMEOUT_MS,
    ConnectionConfig,
    connect,
)


class TestConnectionConfig:
    """Test ConnectionConfig.from_env"""

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            config = ConnectionConfig.from_env()

        assert config == ConnectionConfig(
            busy_timeout_ms=DEFAULT_BUSY_TIMEOUT_MS, autocommit=True, foreign_keys=True
        )

    def test_from_env_values(self):
        env = {
            "SQLITE_STORAGE_BUSY_TIMEOUT_MS": "500",
            "SQLITE_STORAGE_AUTOCOMMIT": "0",
            "SQLITE_STORAGE_FOREIGN_KEYS": "false",
        }
        with patch.dict("os.environ", env, clear=True):
            config = ConnectionConfig.from_env()

        assert config.busy_timeout_ms == 500
        assert config.autocommit is False
        assert config.foreign_keys is False

    def test_invalid_timeout_uses_default(self, caplog):
        with patch.dict("os.environ", {"SQLITE_STORAGE_BUSY_TIMEOUT_MS": "soon"}, clear=True):
            config = ConnectionConfig.from_env()

        assert config.busy_timeout_ms == DEFAULT_BUSY_TIMEOUT_MS
        assert "Invalid SQLITE_STORAGE_BUSY_TIMEOUT_MS" in caplog.text

    @pytest.mark.parametrize(
        "raw, expected",
        [("-10", 0), (str(MAX_BUSY_TIMEOUT_MS + 1), MAX_BUSY_TIMEOUT_MS)],
    )
    def test_timeout_clamped(self, raw, expected):
        with patch.dict("os.environ", {"SQLITE_STORAGE_BUSY_TIMEOUT_MS": raw}, clear=True):
            config = ConnectionConfig.from_env()

        assert config.busy_timeout_ms == expected


class TestConnect:
    """Test connection construction"""

    def test_writable_connection(self, tmp_path):
        conn = connect(tmp_path / "app.db", config=ConnectionConfig(busy_timeout_ms=1234))
        try:
            assert conn.isolation_level is None
            assert conn.execute("PRAGMA busy_timeout").fetchone()[0] == 1234
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        finally:
            conn.close()

        assert (tmp_path / "app.db").exists()

    def test_transactional_connection(self, tmp_path):
        conn = connect(tmp_path / "app.db", config=ConnectionConfig(autocommit=False, foreign_keys=False))
        try:
            assert conn.isolation_level == ""
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 0
        finally:
            conn.close()

    def test_in_memory(self):
        conn = connect(":memory:", config=ConnectionConfig())
        try:
            assert conn.execute("SELECT 1").fetchone() == (1,)
        finally:
            conn.close()

    def test_directory_rejected(self, tmp_path):
        with pytest.raises(ValueError, match="directory"):
            connect(tmp_path)

    def test_read_only_missing_file(self, tmp_path):
        with pytest.raises(sqlite3.OperationalError, match="read-only access requested"):
            connect(tmp_path / "missing.db", read_only=True)

        assert not (tmp_path / "missing.db").exists()

    def test_read_only_rejects_writes(self, tmp_path):
        db_path = tmp_path / "app.db"
        sqlite3.connect(db_path).close()

        conn = connect(db_path, read_only=True, config=ConnectionConfig())
        try:
            assert conn.execute("PRAGMA query_only").fetchone()[0] == 1
            with pytest.raises(sqlite3.OperationalError):
                conn.execute("CREATE TABLE t (id TEXT)")
        finally:
            conn.close()

    def test_read_only_path_with_spaces(self, tmp_path):
        db_path = tmp_path / "my data" / "app.db"
        db_path.parent.mkdir()
        sqlite3.connect(db_path).close()

        conn = connect(str(db_path), read_only=True, config=ConnectionConfig())
        conn.close()
