"""
In-memory object stores mirroring a single SQLite table.

A store bulk-loads every row of its table into memory as typed items keyed
by primary key, and on teardown reconciles the in-memory collection back to
the table with an upsert pass followed by a delete pass.

Usage:
    from sqlite_storage import SqliteStorage, connect

    with SqliteStorage(connect("app.db"), "users", User) as users:
        users.save("7", User(id="7", name="Grace"))
"""

from .connection import ConnectionConfig, connect
from .exceptions import (
    BackendError,
    ConfigurationError,
    InconsistentItemShapeError,
    InvalidColumnNamesError,
    ItemClassError,
    ItemNotObjectError,
    NonExistentClassError,
    NonExistentPrimaryKeyAccessorError,
    QueryError,
    RowShapeError,
    StatementError,
    StorageError,
    ValidationError,
)
from .interfaces import Closable, HasPrimaryKey, Loadable, ManagedStorage, Persistable
from .lifecycle import StorageLifeCycleHooks
from .memory import MemoryStorage
from .reconcile import ReconciliationEngine, ReconciliationResult
from .storage import SqliteReadOnlyStorage, SqliteStorage

__version__ = "1.0.0"
__all__ = [
    "SqliteStorage",
    "SqliteReadOnlyStorage",
    "MemoryStorage",
    "StorageLifeCycleHooks",
    "ReconciliationEngine",
    "ReconciliationResult",
    "ConnectionConfig",
    "connect",
    "HasPrimaryKey",
    "Loadable",
    "Persistable",
    "Closable",
    "ManagedStorage",
    "StorageError",
    "ConfigurationError",
    "NonExistentClassError",
    "NonExistentPrimaryKeyAccessorError",
    "ValidationError",
    "InvalidColumnNamesError",
    "ItemNotObjectError",
    "ItemClassError",
    "InconsistentItemShapeError",
    "BackendError",
    "QueryError",
    "RowShapeError",
    "StatementError",
]
