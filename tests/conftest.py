"""
Pytest configuration and fixtures for sqlite-storage tests.
Provides temporary SQLite databases and mock connections.
"""

import sqlite3
from pathlib import Path
from unittest.mock import MagicMock

import pytest

USERS = [
    {"id": "id1", "name": "name1"},
    {"id": "id2", "name": "name2"},
    {"id": "id3", "name": "name3"},
    {"id": "id4", "name": "name4"},
    {"id": "id5", "name": "name5"},
]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: test against a real SQLite file")
    config.addinivalue_line("markers", "property: hypothesis property-based test")


def create_users_table(db_path: Path, rows: list[dict] | None = None) -> None:
    """Create the users table and insert rows."""
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            'CREATE TABLE IF NOT EXISTS "users" ([id] TEXT, [name] TEXT, PRIMARY KEY([id] ASC))'
        )
        conn.executemany(
            'INSERT INTO "users" ([id], [name]) VALUES (:id, :name)', rows or []
        )
        conn.commit()
    finally:
        conn.close()


def fetch_users(db_path: Path) -> dict[str, str]:
    """Return {id: name} for every row of the users table."""
    conn = sqlite3.connect(db_path)
    try:
        return dict(conn.execute('SELECT [id], [name] FROM "users"').fetchall())
    finally:
        conn.close()


@pytest.fixture()
def users_db(tmp_path: Path) -> Path:
    """A database file holding the five default users."""
    db_path = tmp_path / "integration-test.db"
    create_users_table(db_path, USERS)
    return db_path


def make_cursor(columns: list[str], rows: list[tuple]) -> MagicMock:
    """Cursor mock returning rows for a query over columns."""
    cursor = MagicMock()
    cursor.description = [(col, None, None, None, None, None, None) for col in columns]
    cursor.fetchall.return_value = rows
    return cursor


@pytest.fixture()
def connection_mock() -> MagicMock:
    """Connection mock whose load query returns an empty users table."""
    connection = MagicMock(spec=sqlite3.Connection)
    connection.execute.return_value = make_cursor(["id", "name"], [])
    cursor = MagicMock()
    cursor.fetchall.return_value = []
    connection.cursor.return_value = cursor
    return connection
