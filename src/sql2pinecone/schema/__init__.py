"""Schema discovery — dialect introspection and text-column classification."""

from sql2pinecone.schema.classifier import TEXT_TYPES, classify_columns, is_sqlite_text_type
from sql2pinecone.schema.dialects import (
    DIALECTS,
    CatalogDialect,
    Dialect,
    MySQLDialect,
    PostgresDialect,
    SQLiteDialect,
    SQLServerDialect,
    resolve_dialect,
)
from sql2pinecone.schema.discovery import discover_schema
from sql2pinecone.schema.types import (
    ColumnMetadataRow,
    DatabaseSchema,
    TableSchema,
    schema_to_dict,
)

__all__ = [
    "DIALECTS",
    "TEXT_TYPES",
    "CatalogDialect",
    "ColumnMetadataRow",
    "DatabaseSchema",
    "Dialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLServerDialect",
    "SQLiteDialect",
    "TableSchema",
    "classify_columns",
    "discover_schema",
    "is_sqlite_text_type",
    "resolve_dialect",
    "schema_to_dict",
]
