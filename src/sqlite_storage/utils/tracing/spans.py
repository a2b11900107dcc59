"""
Spans for store operations and the SQL statements they run.

Two span families are emitted:

- ``sqlite_storage.<operation>`` (load, persist, reconcile, connect) with
  ``sqlite_storage.*`` attributes
- ``db.<statement>`` (select, upsert, delete) with the OpenTelemetry
  database attributes ``db.system``, ``db.operation`` and ``db.sql.table``

Usage:
    with store_span("load", "customers") as span:
        rows = cursor.fetchall()
        annotate(rows=len(rows))
"""

import functools
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

from .provider import get_tracer

ATTRIBUTE_PREFIX = "sqlite_storage."
DB_SYSTEM = "sqlite"


def _attribute_value(value: Any) -> Any:
    if isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def _prefixed(attributes: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key if "." in key else ATTRIBUTE_PREFIX + key: _attribute_value(value)
        for key, value in attributes.items()
    }


@contextmanager
def _span(name: str, kind: trace.SpanKind, attributes: Mapping[str, Any]) -> Iterator[Span]:
    with get_tracer().start_as_current_span(
        name,
        kind=kind,
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as e:
            code = getattr(e, "code", None)
            if code is not None:
                span.set_attribute("db.sqlite.error_code", code)
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, f"{type(e).__name__}: {e}"))
            raise


def store_span(
    operation: str,
    table: str,
    kind: trace.SpanKind = trace.SpanKind.CLIENT,
    **attributes,
):
    """
    Span around one store operation on a table.

    Bare attribute names are namespaced under ``sqlite_storage.``; dotted
    names are used as given.
    """
    return _span(
        ATTRIBUTE_PREFIX + operation,
        kind,
        _prefixed({"table": table, **attributes}),
    )


def statement_span(statement: str, table: str):
    """Span around the SQL of one reconciliation pass."""
    return _span(
        f"db.{statement.lower()}",
        trace.SpanKind.CLIENT,
        {
            "db.system": DB_SYSTEM,
            "db.operation": statement.upper(),
            "db.sql.table": table,
        },
    )


def annotate(**attributes) -> None:
    """Add attributes to the current span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(_prefixed(attributes))


def record_event(name: str, **attributes) -> None:
    """Add an event to the current span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=_prefixed(attributes))


def traced(operation: str, **attributes):
    """
    Run the decorated function inside a ``sqlite_storage.<operation>`` span.

    Example:
        >>> @traced("connect", component="connection")
        ... def connect(path):
        ...     ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with _span(
                ATTRIBUTE_PREFIX + operation,
                trace.SpanKind.INTERNAL,
                _prefixed({**attributes, "function": func.__qualname__}),
            ):
                return func(*args, **kwargs)

        return wrapper
    return decorator
