"""Dialect-aware connection helpers — backend names and async driver URLs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.engine import URL, make_url

from sql2pinecone.schema.dialects import resolve_dialect

if TYPE_CHECKING:
    from sqlalchemy import Engine
    from sqlalchemy.ext.asyncio import AsyncEngine


def dialect_name(engine: Engine | AsyncEngine) -> str:
    """Return 'sqlite', 'postgresql', 'mysql', or 'mssql'."""
    # AsyncEngine wraps a sync engine
    sync_engine = getattr(engine, "sync_engine", engine)
    name = sync_engine.dialect.name
    if name in ("postgresql", "postgres"):
        return "postgresql"
    if name in ("mysql", "mariadb"):
        return "mysql"
    if name in ("mssql", "pyodbc"):
        return "mssql"
    return name


def async_url(
    connection_string: str,
    dialect: str | None = None,
    *,
    sqlite_file: str = ":memory:",
) -> URL:
    """Build a SQLAlchemy URL that uses the dialect's async driver.

    *dialect* defaults to the backend named by *connection_string*.  A URL
    that names no driver (``postgres://...``, ``mysql://...``) is rewritten
    to ``<backend>+<async driver>``; an explicit driver is kept.

    For SQLite an empty *connection_string* falls back to *sqlite_file*;
    ``":memory:"`` gives an in-memory database.

    Raises:
        UnsupportedDialectError: if the dialect has no registered variant.
    """
    if dialect is None:
        dialect = make_url(connection_string).get_backend_name()
    variant = resolve_dialect(dialect)

    if variant.backend == "sqlite" and not connection_string:
        database = None if sqlite_file in ("", ":memory:") else sqlite_file
        return URL.create(variant.drivername, database=database)

    url = make_url(connection_string)
    if "+" in url.drivername:
        return url
    return url.set(drivername=variant.drivername)
