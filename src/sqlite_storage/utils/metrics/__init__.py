"""
Prometheus metrics for sqlite-storage.

Usage:
    from sqlite_storage.utils.metrics import ROWS_LOADED, OPERATION_TIME

    ROWS_LOADED.labels(table="customers").inc(120)
    with OPERATION_TIME.labels(table="customers", operation="load").time():
        ...

Metrics register on the default prometheus_client REGISTRY; expose them
with ``prometheus_client.start_http_server`` from the host application.
"""

from typing import Callable, TypeVar

from prometheus_client import REGISTRY, CollectorRegistry

M = TypeVar("M")


def get_or_create_metric(
    factory: Callable[[], M],
    name: str,
    registry: CollectorRegistry = REGISTRY,
) -> M:
    """
    Return the collector registered under name, creating it on first use.

    Counters register under their name without the ``_total`` suffix, so
    look them up by that base name.

    Example:
        ROWS_LOADED = get_or_create_metric(
            lambda: Counter("sqlite_storage_rows_loaded_total", "Rows loaded", ["table"]),
            "sqlite_storage_rows_loaded",
        )
    """
    # Module reloads re-run the definitions; reuse what is registered
    registered = registry._names_to_collectors.get(name)
    if registered is not None:
        return registered
    return factory()


from .storage import (  # noqa: E402
    ERRORS,
    ITEMS,
    OPERATION_TIME,
    ROWS_DELETED,
    ROWS_LOADED,
    ROWS_UPSERTED,
    record_error,
)

__all__ = [
    "get_or_create_metric",
    "ROWS_LOADED",
    "ROWS_UPSERTED",
    "ROWS_DELETED",
    "ERRORS",
    "OPERATION_TIME",
    "ITEMS",
    "record_error",
]
