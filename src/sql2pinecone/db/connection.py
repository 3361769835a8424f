"""DatabaseConnection — the SQL side of a migration, backed by an AsyncEngine."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import literal_column, select, table, text
from sqlalchemy.ext.asyncio import create_async_engine

from sql2pinecone.db.dialect import dialect_name

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping

    from sqlalchemy.engine import URL
    from sqlalchemy.ext.asyncio import AsyncEngine

    from sql2pinecone.config import MigrationConfig

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Raw queries, row streaming, and teardown over one SQLAlchemy engine.

    Usage::

        db = DatabaseConnection.from_url("sqlite+aiosqlite:///app.db")
        rows = await db.run_raw_query("SELECT name FROM sqlite_master")
        async for row in db.stream_rows("users"):
            ...
        await db.close()
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._closed = False

    @classmethod
    def from_url(cls, url: str | URL, **engine_kwargs: Any) -> DatabaseConnection:
        """Create a connection from an async SQLAlchemy URL."""
        engine_kwargs.setdefault("echo", False)
        return cls(create_async_engine(url, **engine_kwargs))

    @classmethod
    def from_config(cls, config: MigrationConfig) -> DatabaseConnection:
        return cls.from_url(config.connection_url())

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def dialect_name(self) -> str:
        """Normalized backend name of the engine (``sqlite``, ``postgresql``, ...)."""
        return dialect_name(self._engine)

    @property
    def closed(self) -> bool:
        return self._closed

    async def run_raw_query(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute *sql* and return every result row as a plain dict."""
        async with self._engine.connect() as conn:
            result = await conn.execute(text(sql), dict(params or {}))
            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings()]

    async def stream_rows(self, table_name: str) -> AsyncIterator[dict[str, Any]]:
        """Yield every row of *table_name* as an independent dict.

        Uses a server-side cursor when the driver supports one; otherwise the
        result is buffered by the driver and iterated locally.
        """
        stmt = select(literal_column("*")).select_from(table(table_name))
        async with self._engine.connect() as conn:
            logger.debug("Streaming rows from %s", table_name)
            if conn.dialect.supports_server_side_cursors:
                result = await conn.stream(stmt)
                async for row in result.mappings():
                    yield dict(row)
            else:
                buffered = await conn.execute(stmt)
                for row in buffered.mappings():
                    yield dict(row)

    async def close(self) -> None:
        """Dispose of the engine's connection pool.  Safe to call twice."""
        if self._closed:
            return
        await self._engine.dispose()
        self._closed = True
