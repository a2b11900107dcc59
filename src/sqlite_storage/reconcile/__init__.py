"""
Reconciliation of in-memory items back to their table.

Provides:
- ReconciliationEngine: upsert pass followed by delete pass
- Statement builders for the load, upsert, id and delete queries
"""

from .engine import DEFAULT_DELETE_BATCH_SIZE, ReconciliationEngine, ReconciliationResult
from .statements import (
    PRIMARY_KEY_COLUMN,
    delete_sql,
    select_all_sql,
    select_ids_sql,
    upsert_sql,
)

__all__ = [
    "ReconciliationEngine",
    "ReconciliationResult",
    "DEFAULT_DELETE_BATCH_SIZE",
    "PRIMARY_KEY_COLUMN",
    "select_all_sql",
    "upsert_sql",
    "select_ids_sql",
    "delete_sql",
]
