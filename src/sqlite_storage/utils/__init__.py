"""
Ambient utilities for sqlite-storage

Provides:
- logging: logging setup, formatters and ContextLogger
- metrics: Prometheus metrics for loads, persists and errors
- tracing: OpenTelemetry spans
- sql_safety: identifier validation and quoting
"""

__all__ = ["logging", "metrics", "tracing", "sql_safety"]
