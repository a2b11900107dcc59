"""
Context-carrying logger used by the stores.
"""

import logging
from collections.abc import MutableMapping
from typing import Any

# Keyword arguments Logger.log understands itself
_LOG_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that tags every record with fixed context.

    Keyword arguments other than the ones Logger.log accepts become extra
    fields on the record, next to the bound context.

    Usage:
        log = ContextLogger(__name__, table_name="customers")
        log.info("Loaded rows", rows=120)
        # record.table_name == "customers", record.rows == 120
    """

    def __init__(self, name: str, **context):
        super().__init__(logging.getLogger(name), dict(context))

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        fields = {key: kwargs.pop(key) for key in list(kwargs) if key not in _LOG_KWARGS}
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {}), **fields}
        return msg, kwargs

    @property
    def context(self) -> dict[str, Any]:
        return dict(self.extra)

    def bind(self, **context) -> "ContextLogger":
        """Return a logger with additional context; this one is unchanged."""
        return ContextLogger(self.logger.name, **{**self.extra, **context})
