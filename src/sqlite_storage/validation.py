"""
Item validation run before any SQL text is built.

Column names are interpolated into generated statements, so this is the
injection boundary: every item of a snapshot is checked, not only the
first, and the whole batch is rejected before the first statement runs.
"""

import logging
from collections.abc import Iterable
from typing import Any

from .exceptions import (
    InconsistentItemShapeError,
    InvalidColumnNamesError,
    ItemClassError,
    ItemNotObjectError,
)
from .keys import type_name
from .row_codec import columns_of, is_record
from .utils.sql_safety import is_valid_identifier

logger = logging.getLogger(__name__)


def validate(
    item: Any,
    type_class: type,
    expected_columns: tuple[str, ...] | None = None,
) -> tuple[str, ...]:
    """
    Validate one item and return its column names.

    Args:
        item: The stored value
        type_class: The store's configured type
        expected_columns: Column names the item must have (batch shape)

    Raises:
        ItemNotObjectError: If item is not a structured record
        ItemClassError: If item is not an instance of type_class
        InvalidColumnNamesError: If an attribute name is not a safe identifier
        InconsistentItemShapeError: If the columns differ from expected_columns
    """
    if not is_record(item):
        raise ItemNotObjectError(item)

    if not isinstance(item, type_class):
        raise ItemClassError(type_name(type_class))

    columns = columns_of(item)
    invalid = [name for name in columns if not is_valid_identifier(name)]
    if invalid or not columns:
        logger.warning(f"Rejected invalid column names: {invalid!r}")
        raise InvalidColumnNamesError(invalid)

    if expected_columns is not None and columns != expected_columns:
        raise InconsistentItemShapeError(expected_columns, columns)

    return columns


def validate_snapshot(items: Iterable[Any], type_class: type) -> tuple[str, ...]:
    """
    Validate every item against the first item's shape.

    Returns:
        The batch column names (empty for an empty snapshot)
    """
    expected: tuple[str, ...] | None = None
    for item in items:
        expected = validate(item, type_class, expected)
    return expected or ()
