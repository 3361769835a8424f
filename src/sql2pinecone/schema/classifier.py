"""Column classification — flat catalog rows to a per-table schema."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sql2pinecone.schema.types import DatabaseSchema, TableSchema

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sql2pinecone.schema.types import ColumnMetadataRow

# Matched exactly (case-sensitive) against the catalog's data_type.
TEXT_TYPES: frozenset[str] = frozenset(
    {
        # General
        "text",
        "varchar",
        "char",
        "json",
        # PostgreSQL
        "character varying",
        "jsonb",
        # MySQL
        "tinytext",
        "mediumtext",
        "longtext",
        # SQL Server
        "nvarchar",
        "nchar",
        "ntext",
    }
)

# Substrings of a SQLite declared type that mark it as text.
SQLITE_TEXT_MARKERS: tuple[str, ...] = ("CHAR", "TEXT", "JSON")


def classify_columns(rows: Iterable[ColumnMetadataRow]) -> DatabaseSchema:
    """Fold catalog rows into a :data:`DatabaseSchema`.

    Only the first ``YES`` row per table sets the primary key.  Text columns
    are appended in row order without de-duplication.
    """
    schema: DatabaseSchema = {}
    for row in rows:
        table = schema.get(row.table_name)
        if table is None:
            table = schema[row.table_name] = TableSchema()

        if row.primary and not table.primary_key:
            table.primary_key = row.column_name

        if row.data_type in TEXT_TYPES:
            table.text_columns.append(row.column_name)
    return schema


def is_sqlite_text_type(declared_type: str | None) -> bool:
    """Return True if a SQLite declared column type carries text."""
    upper = (declared_type or "").upper()
    return any(marker in upper for marker in SQLITE_TEXT_MARKERS)
