"""Dialect variants — per-database introspection of tables and columns.

Each supported database family is one :class:`Dialect` subclass exposing the
same capabilities (``list_tables``, ``list_columns``, ``discover``).  Catalog
dialects answer with a single ``information_schema`` query whose rows are
folded by :func:`~sql2pinecone.schema.classifier.classify_columns`.  SQLite
has no uniform catalog view, so it walks ``sqlite_master`` and
``PRAGMA table_info`` table by table.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from sql2pinecone.exceptions import UnsupportedDialectError
from sql2pinecone.schema.classifier import classify_columns, is_sqlite_text_type
from sql2pinecone.schema.types import ColumnMetadataRow, DatabaseSchema, TableSchema

if TYPE_CHECKING:
    from sql2pinecone.db.connection import DatabaseConnection


class Dialect(ABC):
    """Introspection capabilities shared by every database family."""

    name: ClassVar[str]
    aliases: ClassVar[tuple[str, ...]]
    backend: ClassVar[str]
    driver: ClassVar[str]

    @property
    def drivername(self) -> str:
        """SQLAlchemy ``backend+driver`` name using the async driver."""
        return f"{self.backend}+{self.driver}"

    @abstractmethod
    async def list_tables(self, db: DatabaseConnection) -> list[str]:
        """Return user table names in discovery order."""

    @abstractmethod
    async def list_columns(self, db: DatabaseConnection, table: str) -> list[ColumnMetadataRow]:
        """Return the column rows of *table*."""

    @abstractmethod
    async def discover(self, db: DatabaseConnection) -> DatabaseSchema:
        """Build the schema of every user table."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# ------------------------------------------------------------------
# Catalog dialects
# ------------------------------------------------------------------


class CatalogDialect(Dialect):
    """A dialect whose columns come from ``information_schema``.

    ``catalog_query`` returns every user column in one scan.
    ``columns_query`` returns one table's columns, bound to ``:table``.
    """

    catalog_query: ClassVar[str]
    columns_query: ClassVar[str]

    async def catalog_rows(self, db: DatabaseConnection) -> list[ColumnMetadataRow]:
        rows = await db.run_raw_query(self.catalog_query)
        return [ColumnMetadataRow.from_mapping(row) for row in rows]

    async def list_tables(self, db: DatabaseConnection) -> list[str]:
        rows = await self.catalog_rows(db)
        return list(dict.fromkeys(row.table_name for row in rows))

    async def list_columns(self, db: DatabaseConnection, table: str) -> list[ColumnMetadataRow]:
        rows = await db.run_raw_query(self.columns_query, {"table": table})
        return [ColumnMetadataRow.from_mapping(row) for row in rows]

    async def discover(self, db: DatabaseConnection) -> DatabaseSchema:
        return classify_columns(await self.catalog_rows(db))


def _catalog_queries(select: str, prefix: str = "") -> tuple[str, str]:
    """Full-scan and single-table variants of a catalog *select*."""
    order = f"\n        ORDER BY\n            {prefix}table_name, {prefix}ordinal_position\n"
    single = f"\n            AND {prefix}table_name = :table"
    return select + order, select + single + order


# Extension tables that live in the public schema but hold no user data.
_PG_EXCLUDED_TABLES = ("pg_stat_statements", "spatial_ref_sys")
_PG_EXCLUDED_SQL = ", ".join(f"'{name}'" for name in _PG_EXCLUDED_TABLES)

_PG_SELECT = f"""
        SELECT
            c.table_name AS table_name,
            c.column_name AS column_name,
            c.data_type AS data_type,
            CASE
                WHEN tc.constraint_type = 'PRIMARY KEY' THEN 'YES'
                ELSE 'NO'
            END AS is_primary_key
        FROM
            information_schema.columns c
        LEFT JOIN
            information_schema.key_column_usage kcu ON c.table_name = kcu.table_name
            AND c.column_name = kcu.column_name
            AND c.table_schema = kcu.table_schema
        LEFT JOIN
            information_schema.table_constraints tc ON kcu.constraint_name = tc.constraint_name
            AND kcu.table_name = tc.table_name
            AND kcu.table_schema = tc.table_schema
            AND tc.constraint_type = 'PRIMARY KEY'
        WHERE
            c.table_schema = current_schema()
            AND c.table_name NOT IN ({_PG_EXCLUDED_SQL})"""

_MYSQL_SELECT = """
        SELECT
            table_name AS table_name,
            column_name AS column_name,
            data_type AS data_type,
            CASE
                WHEN column_key = 'PRI' THEN 'YES'
                ELSE 'NO'
            END AS is_primary_key
        FROM
            information_schema.columns
        WHERE
            table_schema = DATABASE()"""

_MSSQL_SELECT = """
        SELECT
            c.table_name AS table_name,
            c.column_name AS column_name,
            c.data_type AS data_type,
            CASE
                WHEN tc.constraint_type = 'PRIMARY KEY' THEN 'YES'
                ELSE 'NO'
            END AS is_primary_key
        FROM
            information_schema.columns c
        LEFT JOIN
            information_schema.key_column_usage kcu ON c.table_name = kcu.table_name
            AND c.column_name = kcu.column_name
        LEFT JOIN
            information_schema.table_constraints tc ON kcu.constraint_name = tc.constraint_name
            AND kcu.table_name = tc.table_name
            AND tc.constraint_type = 'PRIMARY KEY'
        WHERE
            c.table_catalog = DB_NAME()"""


class PostgresDialect(CatalogDialect):
    name = "postgresql"
    aliases = ("postgresql", "postgres", "pg")
    backend = "postgresql"
    driver = "asyncpg"

    excluded_tables: ClassVar[tuple[str, ...]] = _PG_EXCLUDED_TABLES

    catalog_query, columns_query = _catalog_queries(_PG_SELECT, "c.")


class MySQLDialect(CatalogDialect):
    """MySQL and MariaDB."""

    name = "mysql"
    aliases = ("mysql", "mysql2", "mariadb")
    backend = "mysql"
    driver = "aiomysql"

    catalog_query, columns_query = _catalog_queries(_MYSQL_SELECT)


class SQLServerDialect(CatalogDialect):
    name = "mssql"
    aliases = ("mssql", "sqlserver")
    backend = "mssql"
    driver = "aioodbc"

    catalog_query, columns_query = _catalog_queries(_MSSQL_SELECT, "c.")


# ------------------------------------------------------------------
# SQLite
# ------------------------------------------------------------------


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class SQLiteDialect(Dialect):
    """SQLite: tables from ``sqlite_master``, columns from ``PRAGMA table_info``.

    The key is the first column with a positive ``pk`` position.  Text
    columns are matched by substring on the declared type (``CHAR``,
    ``TEXT``, ``JSON``) rather than against the catalog type set.
    """

    name = "sqlite"
    aliases = ("sqlite", "sqlite3")
    backend = "sqlite"
    driver = "aiosqlite"

    tables_query = "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"

    async def list_tables(self, db: DatabaseConnection) -> list[str]:
        rows = await db.run_raw_query(self.tables_query)
        return [row["name"] for row in rows]

    async def list_columns(self, db: DatabaseConnection, table: str) -> list[ColumnMetadataRow]:
        rows = await db.run_raw_query(f"PRAGMA table_info({_quote_identifier(table)})")
        return [
            ColumnMetadataRow(
                table_name=table,
                column_name=row["name"],
                data_type=row["type"] or "",
                is_primary_key="YES" if (row["pk"] or 0) > 0 else "NO",
            )
            for row in rows
        ]

    async def discover(self, db: DatabaseConnection) -> DatabaseSchema:
        schema: DatabaseSchema = {}
        for table_name in await self.list_tables(db):
            table = TableSchema()
            for column in await self.list_columns(db, table_name):
                if column.primary and not table.primary_key:
                    table.primary_key = column.column_name
                if is_sqlite_text_type(column.data_type):
                    table.text_columns.append(column.column_name)
            schema[table_name] = table
        return schema


# ------------------------------------------------------------------
# Registry
# ------------------------------------------------------------------

DIALECTS: tuple[Dialect, ...] = (
    PostgresDialect(),
    MySQLDialect(),
    SQLServerDialect(),
    SQLiteDialect(),
)

_BY_ALIAS: dict[str, Dialect] = {alias: d for d in DIALECTS for alias in d.aliases}


def resolve_dialect(name: str | Dialect) -> Dialect:
    """Return the dialect variant registered under *name* (case-insensitive).

    Raises:
        UnsupportedDialectError: if no variant matches.
    """
    if isinstance(name, Dialect):
        return name
    dialect = _BY_ALIAS.get((name or "").strip().lower())
    if dialect is None:
        msg = f"Unsupported database client: {name}"
        raise UnsupportedDialectError(msg)
    return dialect
