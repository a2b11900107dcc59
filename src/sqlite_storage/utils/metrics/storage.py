"""
Metrics for store load, persist and reconciliation passes.
"""

import logging

from prometheus_client import Counter, Gauge, Histogram

from . import get_or_create_metric

logger = logging.getLogger(__name__)

# Counter names are registered without the _total suffix
ROWS_LOADED = get_or_create_metric(
    lambda: Counter(
        "sqlite_storage_rows_loaded_total",
        "Rows loaded from a table into memory",
        ["table"],
    ),
    "sqlite_storage_rows_loaded",
)

ROWS_UPSERTED = get_or_create_metric(
    lambda: Counter(
        "sqlite_storage_rows_upserted_total",
        "Rows written by the upsert pass",
        ["table"],
    ),
    "sqlite_storage_rows_upserted",
)

ROWS_DELETED = get_or_create_metric(
    lambda: Counter(
        "sqlite_storage_rows_deleted_total",
        "Rows removed by the delete pass",
        ["table"],
    ),
    "sqlite_storage_rows_deleted",
)

ERRORS = get_or_create_metric(
    lambda: Counter(
        "sqlite_storage_errors_total",
        "Load and persist failures",
        ["table", "operation", "error_type"],
    ),
    "sqlite_storage_errors",
)

OPERATION_TIME = get_or_create_metric(
    lambda: Histogram(
        "sqlite_storage_operation_seconds",
        "Duration of store operations",
        ["table", "operation"],
        buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0],
    ),
    "sqlite_storage_operation_seconds",
)

ITEMS = get_or_create_metric(
    lambda: Gauge(
        "sqlite_storage_items",
        "Items held in memory",
        ["table"],
    ),
    "sqlite_storage_items",
)


def record_error(table: str, operation: str, error: Exception) -> None:
    """Count a failed operation by exception type."""
    ERRORS.labels(table=table, operation=operation, error_type=type(error).__name__).inc()
    logger.debug(f"Recorded {operation} error for {table}: {type(error).__name__}")
