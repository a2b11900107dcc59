"""
Reconciliation of an in-memory snapshot back to its table.

Two passes run in order on every persist:

1. Upsert: one insert-or-update per snapshot item, reusing a single
   statement text so sqlite3 keeps it prepared and only rebinds values.
2. Delete: read every persisted id, subtract the snapshot's ids, and
   delete the remainder.

Upserting first means a reader between the passes may briefly see rows
that are about to be deleted, but never misses a row that is in memory.
There is no transaction around the two passes; a failure part-way leaves
the statements already executed in place.
"""

import logging
import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from opentelemetry import trace

from ..exceptions import StatementError
from ..keys import primary_key_value
from ..row_codec import Schema, encode_params
from ..utils.metrics import OPERATION_TIME, ROWS_DELETED, ROWS_UPSERTED
from ..utils.tracing import annotate, statement_span, store_span
from ..validation import validate_snapshot
from .statements import delete_sql, select_ids_sql, upsert_sql

logger = logging.getLogger(__name__)

# Stay under SQLITE_MAX_VARIABLE_NUMBER on builds that still default to 999
DEFAULT_DELETE_BATCH_SIZE = 999


@dataclass(frozen=True)
class ReconciliationResult:
    """Row counts written by one reconciliation."""

    upserted: int = 0
    deleted: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"upserted": self.upserted, "deleted": self.deleted}


class ReconciliationEngine:
    """Makes a table's contents match an in-memory snapshot."""

    def __init__(
        self,
        connection: Any,
        table_name: str,
        type_class: type,
        delete_batch_size: int = DEFAULT_DELETE_BATCH_SIZE,
    ):
        """
        Initialize the engine.

        Args:
            connection: sqlite3 connection (or any DB-API connection with
                named-parameter support)
            table_name: Table to reconcile; must declare id as its primary key
            type_class: Type every snapshot item must be an instance of
            delete_batch_size: Maximum ids bound into one DELETE statement
        """
        if delete_batch_size < 1:
            raise ValueError(f"Invalid delete_batch_size: {delete_batch_size}. Must be >= 1.")

        self.connection = connection
        self.table_name = table_name
        self.type_class = type_class
        self.delete_batch_size = delete_batch_size

    def reconcile(self, snapshot: Sequence[tuple[str, Any]]) -> ReconciliationResult:
        """
        Upsert every snapshot item, then delete rows absent from the snapshot.

        An empty snapshot is a no-op: nothing is validated and the
        connection is not touched.

        Args:
            snapshot: (key, item) pairs captured at the start of persist

        Returns:
            Counts of rows upserted and deleted

        Raises:
            ValidationError: If any item fails validation (before any SQL runs)
            StatementError: If a statement fails to prepare or execute
        """
        if not snapshot:
            logger.debug(f"Nothing to reconcile for {self.table_name}")
            return ReconciliationResult()

        items = [item for _, item in snapshot]

        with store_span(
            "reconcile", self.table_name, kind=trace.SpanKind.INTERNAL, items=len(items)
        ):
            validate_snapshot(items, self.type_class)
            schema = Schema.from_item(items[0])

            upserted = self._upsert(items, schema)
            deleted = self._delete_removed(items)

            annotate(upserted=upserted, deleted=deleted)
            logger.info(
                f"Reconciled {self.table_name}: {upserted} upserted, {deleted} deleted"
            )
            return ReconciliationResult(upserted=upserted, deleted=deleted)

    def _upsert(self, items: list[Any], schema: Schema) -> int:
        """Write every item; later items win on duplicate ids."""
        sql = upsert_sql(self.table_name, schema.names)

        with statement_span("UPSERT", self.table_name), \
                OPERATION_TIME.labels(table=self.table_name, operation="upsert").time():
            try:
                cursor = self.connection.cursor()
                for item in items:
                    cursor.execute(sql, encode_params(item, schema))
                self.connection.commit()
            except (sqlite3.Error, OverflowError) as e:
                logger.error(f"Upsert into {self.table_name} failed: {e}")
                raise StatementError.from_exception(e) from e

        ROWS_UPSERTED.labels(table=self.table_name).inc(len(items))
        logger.debug(f"Upserted {len(items)} rows into {self.table_name}")
        return len(items)

    def _delete_removed(self, items: list[Any]) -> int:
        """Delete persisted rows whose id is not in the snapshot."""
        with statement_span("DELETE", self.table_name), \
                OPERATION_TIME.labels(table=self.table_name, operation="delete").time():
            try:
                cursor = self.connection.cursor()
                cursor.execute(select_ids_sql(self.table_name))
                table_ids = self._fetch_ids(cursor)

                kept = {str(primary_key_value(item)) for item in items}
                stale = [raw for key, raw in table_ids.items() if key not in kept]

                logger.debug(
                    f"Delete pass for {self.table_name}: {len(table_ids)} persisted, "
                    f"{len(kept)} in memory, {len(stale)} stale"
                )

                for start in range(0, len(stale), self.delete_batch_size):
                    batch = stale[start:start + self.delete_batch_size]
                    cursor.execute(delete_sql(self.table_name, len(batch)), batch)

                if stale:
                    self.connection.commit()
            except (sqlite3.Error, OverflowError) as e:
                logger.error(f"Delete from {self.table_name} failed: {e}")
                raise StatementError.from_exception(e) from e

        ROWS_DELETED.labels(table=self.table_name).inc(len(stale))
        return len(stale)

    @staticmethod
    def _fetch_ids(cursor: Any) -> dict[str, Any]:
        """Map each persisted id, as a string, to its stored value."""
        return {str(row[0]): row[0] for row in cursor.fetchall()}
