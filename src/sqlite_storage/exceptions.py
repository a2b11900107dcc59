"""
Exception hierarchy for sqlite-storage.

Three kinds of failure reach callers:

- ConfigurationError: the stored type is unusable (construction time)
- ValidationError: an item cannot be written safely (persist time)
- BackendError: SQLite rejected a query or statement, or a loaded row
  did not fit the stored type (load/persist time)

None are retried. Load and persist clear the in-memory collection before
raising so a retry never diffs against stale state.
"""

from typing import Any


class StorageError(Exception):
    """Base exception for sqlite-storage errors."""

    pass


class ConfigurationError(StorageError):
    """Raised when a store cannot be bound to its configured type."""

    pass


class NonExistentClassError(ConfigurationError):
    """Raised when the configured type cannot be resolved to a class."""

    def __init__(self, type_class_name: str):
        self.type_class_name = type_class_name
        super().__init__(f"The class {type_class_name} does not exist.")


class NonExistentPrimaryKeyAccessorError(ConfigurationError):
    """Raised when a type has neither a primary_key() method nor an id attribute."""

    def __init__(self, type_class_name: str):
        self.type_class_name = type_class_name
        super().__init__(
            f"The class {type_class_name} should have either "
            "a 'primary_key' method or an 'id' attribute."
        )


class ValidationError(StorageError, ValueError):
    """Raised when an item cannot be safely turned into SQL."""

    pass


class InvalidColumnNamesError(ValidationError):
    """Raised when an attribute name is not a safe SQL identifier."""

    def __init__(self, invalid_names: list[str] | None = None):
        self.invalid_names = list(invalid_names or [])
        super().__init__("One or more column names are invalid.")


class ItemNotObjectError(ValidationError):
    """Raised when a stored value is not a structured record."""

    def __init__(self, item: Any = None):
        self.item_type = type(item).__name__
        super().__init__("The item must be an object.")


class ItemClassError(ValidationError):
    """Raised when a stored record is not an instance of the store's type."""

    def __init__(self, type_class_name: str):
        self.type_class_name = type_class_name
        super().__init__(f"The item must be a {type_class_name}")


class InconsistentItemShapeError(ValidationError):
    """Raised when items in one snapshot do not share the same columns."""

    def __init__(self, expected: tuple[str, ...], actual: tuple[str, ...]):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Item columns {list(actual)} do not match the batch columns {list(expected)}."
        )


class BackendError(StorageError):
    """
    Raised when SQLite reports a failure.

    Attributes:
        message: The backend's error message
        code: The backend's error code, when the driver exposes one
    """

    def __init__(self, message: str, code: int | None = None):
        self.message = message
        self.code = code
        super().__init__(message)

    @classmethod
    def from_exception(cls, exc: Exception) -> "BackendError":
        """Wrap a sqlite3 exception, keeping its extended error code."""
        return cls(str(exc), getattr(exc, "sqlite_errorcode", None))


class QueryError(BackendError):
    """Raised when the load query fails."""

    pass


class StatementError(BackendError):
    """Raised when an upsert or delete statement fails to prepare or execute."""

    pass


class RowShapeError(QueryError):
    """Raised when a loaded row does not fit the stored type's constructor."""

    def __init__(self, type_class_name: str, columns: list[str], reason: str):
        self.type_class_name = type_class_name
        self.columns = list(columns)
        super().__init__(
            f"Columns {self.columns} cannot build a {type_class_name}: {reason}"
        )
