"""
OpenTelemetry tracing for sqlite-storage.

Loads, persists and each reconciliation pass get their own span, so a
slow table shows up end to end in the host application's traces.
"""

from .provider import TracingConfig, get_tracer, initialize_tracing, shutdown_tracing
from .spans import annotate, record_event, statement_span, store_span, traced

__all__ = [
    "TracingConfig",
    "initialize_tracing",
    "get_tracer",
    "shutdown_tracing",
    "store_span",
    "statement_span",
    "annotate",
    "record_event",
    "traced",
]
