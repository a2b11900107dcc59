"""
Primary-key derivation for stored items.

An item's key comes from its ``primary_key()`` method when the type has
one, otherwise from its ``id`` attribute. Stores check the type once at
construction, so derive_key never sees a type with neither.
"""

import dataclasses
import importlib
import inspect
from typing import Any

from .exceptions import NonExistentClassError, NonExistentPrimaryKeyAccessorError
from .interfaces import HasPrimaryKey

PRIMARY_KEY_METHOD = "primary_key"
ID_ATTRIBUTE = "id"


def type_name(type_class: type) -> str:
    """Qualified name used in error messages."""
    return f"{type_class.__module__}.{type_class.__qualname__}"


def resolve_type(type_class: type | str) -> type:
    """
    Resolve the stored type.

    Args:
        type_class: A class, or an import path such as
            "package.module.ClassName" or "package.module:ClassName"

    Returns:
        The class

    Raises:
        NonExistentClassError: If the path cannot be imported or does not name a class
    """
    if isinstance(type_class, type):
        return type_class

    if not isinstance(type_class, str):
        raise NonExistentClassError(repr(type_class))

    if ":" in type_class:
        module_name, _, attr = type_class.partition(":")
    else:
        module_name, _, attr = type_class.rpartition(".")

    try:
        resolved = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError, ValueError):
        raise NonExistentClassError(type_class) from None

    if not isinstance(resolved, type):
        raise NonExistentClassError(type_class)
    return resolved


def has_primary_key_method(type_class: type) -> bool:
    # Protocol checks only see the attribute; it must also be callable
    return issubclass(type_class, HasPrimaryKey) and callable(
        getattr(type_class, PRIMARY_KEY_METHOD)
    )


def declares_id(type_class: type) -> bool:
    """True if the class declares an id field, annotation, attribute or slot."""
    if dataclasses.is_dataclass(type_class):
        if any(f.name == ID_ATTRIBUTE for f in dataclasses.fields(type_class)):
            return True

    for klass in type_class.__mro__:
        if ID_ATTRIBUTE in inspect.get_annotations(klass):
            return True

    return hasattr(type_class, ID_ATTRIBUTE)


def ensure_primary_key_accessor(type_class: type) -> None:
    """
    Raises:
        NonExistentPrimaryKeyAccessorError: If items of type_class cannot be keyed
    """
    if not has_primary_key_method(type_class) and not declares_id(type_class):
        raise NonExistentPrimaryKeyAccessorError(type_name(type_class))


def derive_key(item: Any) -> str:
    """Return the in-memory key for an item."""
    if isinstance(item, HasPrimaryKey) and callable(item.primary_key):
        return str(item.primary_key())

    if hasattr(item, ID_ATTRIBUTE):
        return str(getattr(item, ID_ATTRIBUTE))

    raise NonExistentPrimaryKeyAccessorError(type_name(type(item)))


def primary_key_value(item: Any) -> Any:
    """
    Value matched against the table's id column during reconciliation.

    This is the item's id attribute when it has one; the derived key
    otherwise. The two must coincide for a correct diff.
    """
    if hasattr(item, ID_ATTRIBUTE):
        return getattr(item, ID_ATTRIBUTE)
    return derive_key(item)
