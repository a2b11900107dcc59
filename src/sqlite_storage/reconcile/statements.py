"""
SQL statement synthesis for load and reconciliation.

Table names are trusted and quoted verbatim; column names must already
have passed validation and are re-checked by quote_identifier. Values are
always bound, never formatted into the SQL text.
"""

from collections.abc import Sequence

from ..utils.sql_safety import quote_identifier, quote_table_name

PRIMARY_KEY_COLUMN = "id"


def select_all_sql(table: str) -> str:
    """Load query."""
    return f"SELECT * FROM {quote_table_name(table)};"


def upsert_sql(table: str, columns: Sequence[str]) -> str:
    """
    Insert-or-update keyed on the id column, with named placeholders.

    Example:
        INSERT INTO "users" ([id], [name]) VALUES (:id, :name)
        ON CONFLICT([id]) DO UPDATE SET [id]=excluded.[id], [name]=excluded.[name]
    """
    if not columns:
        raise ValueError("Cannot build an upsert without columns")

    quoted = [quote_identifier(col) for col in columns]
    columns_str = ", ".join(quoted)
    placeholders = ", ".join(f":{col}" for col in columns)
    assignments = ", ".join(f"{q}=excluded.{q}" for q in quoted)
    pk = quote_identifier(PRIMARY_KEY_COLUMN)

    return (
        f"INSERT INTO {quote_table_name(table)} ({columns_str}) VALUES ({placeholders}) "
        f"ON CONFLICT({pk}) DO UPDATE SET {assignments}"
    )


def select_ids_sql(table: str) -> str:
    """Query for every persisted primary key."""
    return f"SELECT {quote_identifier(PRIMARY_KEY_COLUMN)} FROM {quote_table_name(table)}"


def delete_sql(table: str, count: int) -> str:
    """Delete rows whose id is one of count bound values."""
    if count < 1:
        raise ValueError(f"Invalid id count: {count}. Must be >= 1.")

    placeholders = ", ".join("?" for _ in range(count))
    return (
        f"DELETE FROM {quote_table_name(table)} "
        f"WHERE {quote_identifier(PRIMARY_KEY_COLUMN)} IN ({placeholders})"
    )
