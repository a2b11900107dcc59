"""
SQLite-backed in-memory stores.

A store mirrors one table as typed items held in memory:

    Constructed -> Loaded -> (mutated)* -> Persisted -> Closed

SqliteStorage writes changes back on persist; SqliteReadOnlyStorage loads
the same way but its persist never touches the database.

Usage:
    with SqliteStorage(connect("app.db"), "users", User) as users:
        user = users.find("42")
        users.replace("42", dataclasses.replace(user, name="Ada"))
    # persisted and closed here
"""

import logging
import sqlite3
from typing import Any

from .exceptions import QueryError, RowShapeError, StorageError
from .keys import derive_key, ensure_primary_key_accessor, resolve_type
from .lifecycle import StorageLifeCycleHooks
from .memory import MemoryStorage
from .reconcile import ReconciliationEngine, select_all_sql
from .row_codec import decode
from .utils.logging import ContextLogger
from .utils.metrics import ITEMS, OPERATION_TIME, ROWS_LOADED, record_error
from .utils.tracing import annotate, store_span

logger = logging.getLogger(__name__)


class _SqliteReadStorage(MemoryStorage):
    """Loading, closing and lifecycle wiring shared by both stores."""

    def __init__(self, connection: Any, table_name: str, type_class: type | str):
        """
        Bind the store to a connection, table and stored type.

        Args:
            connection: Open sqlite3 connection, owned by the store from now on
            table_name: Table to mirror (trusted, interpolated verbatim)
            type_class: Stored type, or its import path

        Raises:
            NonExistentClassError: If type_class does not resolve to a class
            NonExistentPrimaryKeyAccessorError: If the type has neither a
                primary_key() method nor an id attribute
        """
        super().__init__()
        self.type_class = resolve_type(type_class)
        ensure_primary_key_accessor(self.type_class)

        self.connection = connection
        self.table_name = table_name
        self.lifecycle = StorageLifeCycleHooks(self)
        self._closed = False
        self._log = ContextLogger(
            __name__, table_name=table_name, store=type(self).__name__
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def load(self) -> None:
        """
        Load every row of the table into memory.

        Calling load again re-queries and overwrites items with the same key.

        Raises:
            QueryError: If the query fails; the collection is cleared first
            RowShapeError: If the table's columns do not match the stored
                type's constructor; the collection is cleared first
        """
        with store_span("load", self.table_name), \
                OPERATION_TIME.labels(table=self.table_name, operation="load").time():
            try:
                cursor = self.connection.execute(select_all_sql(self.table_name))
                columns = [description[0] for description in cursor.description]
                rows = cursor.fetchall()
            except sqlite3.Error as e:
                self._load_failed(e)
                raise QueryError.from_exception(e) from e

            try:
                items = [decode(dict(zip(columns, row)), self.type_class) for row in rows]
            except TypeError as e:
                self._load_failed(e)
                raise RowShapeError(self.type_class.__name__, columns, str(e)) from e

            for item in items:
                self.save(derive_key(item), item)

            annotate(rows=len(rows))

        ROWS_LOADED.labels(table=self.table_name).inc(len(rows))
        ITEMS.labels(table=self.table_name).set(len(self))
        self._log.info(f"Loaded {len(rows)} rows from {self.table_name}", rows=len(rows))

    def _load_failed(self, error: Exception) -> None:
        self.clear()
        record_error(self.table_name, "load", error)
        self._log.error(f"Loading {self.table_name} failed: {error}")

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        if self._closed:
            return
        self._before_close()
        self.connection.close()
        self._closed = True
        self._log.debug(f"Closed connection for {self.table_name}")

    def _before_close(self) -> None:
        pass

    def __enter__(self):
        try:
            self.lifecycle.on_init()
        except Exception:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        if exc_type is None:
            self.lifecycle.on_destroy()
        else:
            # Do not write back state from a failed block
            self._log.warning(
                f"Skipping persist for {self.table_name} after {exc_type.__name__}"
            )
            self.close()
        return False

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(table={self.table_name!r}, "
            f"type={self.type_class.__name__}, items={len(self)})"
        )


class SqliteStorage(_SqliteReadStorage):
    """Store that loads a table and reconciles changes back to it."""

    def __init__(self, connection: Any, table_name: str, type_class: type | str):
        super().__init__(connection, table_name, type_class)
        self.engine = ReconciliationEngine(connection, table_name, self.type_class)

    def persist(self) -> None:
        """
        Make the table match the in-memory collection.

        Upserts every item held in memory, then deletes rows whose id is no
        longer held. An empty collection is a no-op.

        Raises:
            ValidationError: If any item cannot be written safely
            StatementError: If SQLite rejects a statement
        Either way the collection is cleared before the error propagates.
        """
        snapshot = self.snapshot()
        if not snapshot:
            self._log.debug(f"Nothing to persist for {self.table_name}")
            return

        with store_span("persist", self.table_name, items=len(snapshot)), \
                OPERATION_TIME.labels(table=self.table_name, operation="persist").time():
            try:
                result = self.engine.reconcile(snapshot)
            except StorageError as e:
                self.clear()
                record_error(self.table_name, "persist", e)
                self._log.error(f"Persisting {self.table_name} failed: {e}")
                raise

        ITEMS.labels(table=self.table_name).set(len(self))
        self._log.info(
            f"Persisted {self.table_name}",
            upserted=result.upserted,
            deleted=result.deleted,
        )

    def _before_close(self) -> None:
        # https://sqlite.org/pragma.html#pragma_optimize
        try:
            self.connection.execute("PRAGMA optimize")
        except sqlite3.Error as e:
            self._log.warning(f"PRAGMA optimize failed for {self.table_name}: {e}")


class SqliteReadOnlyStorage(_SqliteReadStorage):
    """Store that loads a table and never writes to it."""

    def persist(self) -> None:
        """No-op: a read-only store has nothing to write back."""
        self._log.debug(f"Read-only store, skipping persist for {self.table_name}")
