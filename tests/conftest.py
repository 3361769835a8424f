"""Shared fixtures for sql2pinecone tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import text

from sql2pinecone.db.connection import DatabaseConnection
from sql2pinecone.search.types import DeleteResult, UpsertResult

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from sql2pinecone.search.types import VectorEntry


# ------------------------------------------------------------------
# Fakes
# ------------------------------------------------------------------


class FakeEmbedder:
    """Embeds each text as ``[len(text), call_index]``; records every call."""

    model_name = "fake-embed"

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.fail_on_call: int | None = None

    async def embed(self, text: str) -> list[float]:
        return (await self.embed_batch([text]))[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            msg = "embedding service unavailable"
            raise RuntimeError(msg)
        return [[float(len(t)), float(i)] for i, t in enumerate(texts)]


class FakeStore:
    """In-memory VectorStore that records upserts per namespace."""

    def __init__(self, index_name: str = "test-index") -> None:
        self._index_name = index_name
        self.upserts: list[tuple[str, list[VectorEntry]]] = []
        self.connected = False
        self.connect_calls = 0
        self.close_calls = 0
        self.fail_upsert = False
        self.fail_delete = False
        self.fail_fetch = False

    @property
    def index_name(self) -> str:
        return self._index_name

    async def connect(self) -> None:
        self.connect_calls += 1
        self.connected = True

    async def close(self) -> None:
        self.close_calls += 1
        self.connected = False

    async def upsert(self, entries, *, namespace=None) -> UpsertResult:
        if self.fail_upsert:
            msg = "upsert rejected"
            raise RuntimeError(msg)
        self.upserts.append((namespace, list(entries)))
        return UpsertResult(upserted_count=len(entries))

    async def delete(self, ids, *, namespace=None) -> DeleteResult:
        if self.fail_delete:
            msg = "delete rejected"
            raise RuntimeError(msg)
        return DeleteResult(deleted_count=len(ids))

    async def fetch(self, ids, *, namespace=None):
        if self.fail_fetch:
            msg = "fetch rejected"
            raise RuntimeError(msg)
        return [None for _ in ids]

    def sizes(self, namespace: str) -> list[int]:
        return [len(entries) for ns, entries in self.upserts if ns == namespace]


def _matches_table(row: dict[str, Any], params) -> bool:
    """Apply a bound ``:table`` filter the way the catalog SQL would."""
    if not params or "table" not in params:
        return True
    lowered = {str(k).lower(): v for k, v in row.items()}
    return lowered.get("table_name") == params["table"]


class FakeDatabase:
    """DatabaseConnection stand-in with canned rows and call accounting."""

    def __init__(
        self,
        tables: dict[str, list[dict[str, Any]]] | None = None,
        query_results: dict[str, list[dict[str, Any]]] | None = None,
        dialect_name: str = "postgresql",
    ) -> None:
        self.tables = tables or {}
        self.query_results = query_results or {}
        self.dialect_name = dialect_name
        self.queries: list[str] = []
        self.params: list[dict[str, Any]] = []
        self.streamed: list[str] = []
        self.close_calls = 0

    async def run_raw_query(self, sql: str, params=None) -> list[dict[str, Any]]:
        self.queries.append(sql)
        self.params.append(dict(params or {}))
        for needle, rows in self.query_results.items():
            if needle in sql:
                return [dict(r) for r in rows if _matches_table(r, params)]
        return []

    async def stream_rows(self, table_name: str) -> AsyncIterator[dict[str, Any]]:
        self.streamed.append(table_name)
        for row in self.tables.get(table_name, []):
            yield dict(row)

    async def close(self) -> None:
        self.close_calls += 1


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_db_factory():
    """Build a :class:`FakeDatabase` from tables / canned query results."""
    return FakeDatabase


SQLITE_DDL = [
    "CREATE TABLE users (id INTEGER PRIMARY KEY, name VARCHAR(50), bio TEXT, age INTEGER)",
    "CREATE TABLE notes (note_id INTEGER PRIMARY KEY, body NVARCHAR(200), meta JSON)",
    "CREATE TABLE counters (id INTEGER PRIMARY KEY, hits INTEGER)",
    "CREATE TABLE log_lines (line TEXT)",
]


@pytest.fixture
async def sqlite_db(tmp_path: Path) -> AsyncIterator[DatabaseConnection]:
    """File-backed SQLite database with a few tables, wrapped in a DatabaseConnection."""
    db = DatabaseConnection.from_url(f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")
    async with db.engine.begin() as conn:
        for ddl in SQLITE_DDL:
            await conn.execute(text(ddl))
        await conn.execute(
            text("INSERT INTO users (id, name, bio, age) VALUES (:id, :name, :bio, :age)"),
            [
                {"id": 1, "name": "Ann", "bio": None, "age": 30},
                {"id": 2, "name": "", "bio": None, "age": 40},
                {"id": 3, "name": "Bob", "bio": "likes tea", "age": 25},
            ],
        )
        await conn.execute(
            text("INSERT INTO notes (note_id, body, meta) VALUES (:note_id, :body, :meta)"),
            [{"note_id": i, "body": f"note {i}", "meta": None} for i in range(1, 251)],
        )
    yield db
    await db.close()
