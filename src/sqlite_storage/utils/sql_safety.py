"""
SQL safety utilities for preventing SQL injection.

Column names reach generated statements by interpolation, so every name
is checked against a strict ASCII identifier pattern before any SQL text
is built. Table names are trusted configuration and are only quoted.
"""

import re


# Strict ASCII-only pattern for SQL identifiers (no Unicode via \w)
VALID_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_valid_identifier(identifier: object) -> bool:
    """Return True if identifier is a non-empty, safe SQL identifier."""
    return isinstance(identifier, str) and VALID_IDENTIFIER.fullmatch(identifier) is not None


def validate_identifier(identifier: str) -> str:
    """
    Check that a column name can be interpolated into SQL.

    Returns:
        The identifier, unchanged

    Raises:
        ValueError: If the identifier is empty or not a plain ASCII identifier
    """
    if not identifier:
        raise ValueError("SQL identifier cannot be empty")

    if not is_valid_identifier(identifier):
        raise ValueError(
            f"Invalid SQL identifier {identifier!r}: expected ASCII letters, "
            "digits or underscores, not starting with a digit"
        )
    return identifier


def quote_identifier(identifier: str) -> str:
    """
    Bracket-quote a validated column name.

    SQLite accepts the bracket style, which keeps generated statements
    readable next to the double-quoted table name.
    """
    return f"[{validate_identifier(identifier)}]"


def quote_table_name(table_name: str) -> str:
    """
    Quote a table name for interpolation.

    The name is used verbatim; embedded double quotes are doubled so the
    quoted form always denotes exactly one identifier.

    Raises:
        ValueError: If the table name is empty
    """
    if not table_name:
        raise ValueError("Table name cannot be empty")

    escaped = table_name.replace('"', '""')
    return f'"{escaped}"'
