"""
Conversion between table rows and typed items.

Rows decode by passing every column as a keyword argument to the stored
type, so column names must match constructor parameter names exactly.
Items encode to an ordered list of (column, value, sql_type) following the
column order of a Schema captured once per persist batch.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class SqlType(str, Enum):
    """
    SQLite storage class used to bind a value.

    Inherits from str for easy comparison and logging.
    """

    INTEGER = "INTEGER"
    REAL = "REAL"
    TEXT = "TEXT"

    @classmethod
    def of(cls, value: Any) -> "SqlType":
        """Tag a value: integer (bool included), float, else text."""
        if isinstance(value, int):
            return cls.INTEGER
        if isinstance(value, float):
            return cls.REAL
        return cls.TEXT

    def adapt(self, value: Any) -> Any:
        """Coerce a value to this storage class; None stays NULL."""
        if value is None:
            return None
        if self is SqlType.INTEGER:
            return int(value)
        if self is SqlType.REAL:
            return float(value)
        if isinstance(value, (str, bytes)):
            return value
        return str(value)


@dataclass(frozen=True)
class EncodedColumn:
    name: str
    value: Any
    sql_type: SqlType


def is_record(item: Any) -> bool:
    """True for dataclass instances and objects with instance attributes."""
    if isinstance(item, type):
        return False
    return dataclasses.is_dataclass(item) or hasattr(item, "__dict__")


def columns_of(item: Any) -> tuple[str, ...]:
    """
    Column names of an item, in a stable order.

    Dataclass fields in declaration order; otherwise instance attributes
    in assignment order.
    """
    if dataclasses.is_dataclass(item):
        return tuple(f.name for f in dataclasses.fields(item))
    return tuple(vars(item))


@dataclass(frozen=True)
class Schema:
    """Ordered column descriptor for one persist batch."""

    names: tuple[str, ...]

    @classmethod
    def from_item(cls, item: Any) -> "Schema":
        return cls(columns_of(item))


def decode(row: Mapping[str, Any], target_type: type) -> Any:
    """Build an item of target_type from a column -> value mapping."""
    return target_type(**dict(row))


def encode(item: Any, schema: Schema) -> list[EncodedColumn]:
    """
    Enumerate an item's values in schema order.

    Each value is tagged with its own storage class, so a NULL in one row
    does not change how the same column binds in the next.
    """
    encoded = []
    for name in schema.names:
        value = getattr(item, name)
        sql_type = SqlType.of(value)
        encoded.append(EncodedColumn(name, sql_type.adapt(value), sql_type))
    return encoded


def encode_params(item: Any, schema: Schema) -> dict[str, Any]:
    """Named parameters for the upsert statement."""
    return {column.name: column.value for column in encode(item, schema)}
