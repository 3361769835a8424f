"""PineconeVectorStore — upserts table rows into a Pinecone index, one namespace per table."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pinecone import PineconeAsyncio

from sql2pinecone.search.types import DeleteResult, UpsertResult, VectorEntry

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

logger = logging.getLogger(__name__)

# Pinecone accepts at most 1000 vectors per upsert request.
_UPSERT_CHUNK = 1000


def to_pinecone_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Coerce row metadata into values Pinecone accepts.

    Pinecone stores strings, numbers, booleans, and lists of strings, and
    rejects nulls.  ``None`` values are dropped, lists become lists of
    strings, dicts become JSON, bytes become hex, and anything else (dates,
    decimals, UUIDs) is stringified.
    """
    out: dict[str, Any] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (str, bool, int, float)):
            out[key] = value
        elif isinstance(value, (list, tuple)):
            out[key] = [str(v) for v in value if v is not None]
        elif isinstance(value, dict):
            out[key] = json.dumps(value, default=str)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            out[key] = bytes(value).hex()
        else:
            out[key] = str(value)
    return out


def _chunks(entries: Sequence[VectorEntry], size: int) -> Iterator[Sequence[VectorEntry]]:
    for start in range(0, len(entries), size):
        yield entries[start : start + size]


def _payload(entry: VectorEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "values": entry.vector,
        "metadata": to_pinecone_metadata(entry.metadata),
    }


def _entry(fetched: Any) -> VectorEntry:
    return VectorEntry(
        id=fetched.id,
        vector=list(fetched.values or []),
        metadata=dict(fetched.metadata or {}),
    )


class PineconeVectorStore:
    """A Pinecone index reached through ``PineconeAsyncio``.

    ``connect`` resolves the index host and opens an ``IndexAsyncio``
    handle; every other operation needs it.  The client stays available
    through :attr:`client` so an embedding provider can share it.

    Usage::

        store = PineconeVectorStore(index_name="rows", api_key="...")
        await store.connect()
        await store.upsert([VectorEntry(id="1", vector=[0.1, ...])], namespace="users")
        await store.close()
    """

    def __init__(self, *, index_name: str, api_key: str, namespace: str = "") -> None:
        self._index_name = index_name
        self._api_key = api_key
        self._namespace = namespace
        self._client: Any = None
        self._index: Any = None

    @property
    def index_name(self) -> str:
        return self._index_name

    @property
    def client(self) -> Any:
        """The connected ``PineconeAsyncio`` client."""
        if self._client is None:
            msg = "Not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._client

    def _ns(self, namespace: str | None) -> str:
        return self._namespace if namespace is None else namespace

    def _handle(self) -> Any:
        if self._index is None:
            msg = "Not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._index

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        self._client = PineconeAsyncio(api_key=self._api_key)
        description = await self._client.describe_index(self._index_name)
        self._index = self._client.IndexAsyncio(host=description.host)
        logger.debug("Connected to Pinecone index %s at %s", self._index_name, description.host)

    async def close(self) -> None:
        """Close the index handle, then the client.  Safe to call twice."""
        index, self._index = self._index, None
        client, self._client = self._client, None
        if index is not None:
            await index.close()
        if client is not None:
            await client.close()

    # ------------------------------------------------------------------
    # Vectors
    # ------------------------------------------------------------------

    async def upsert(
        self,
        entries: Sequence[VectorEntry],
        *,
        namespace: str | None = None,
    ) -> UpsertResult:
        """Upsert *entries*, at most 1000 per request, with coerced metadata."""
        index = self._handle()
        ns = self._ns(namespace)
        upserted = 0
        for chunk in _chunks(entries, _UPSERT_CHUNK):
            response = await index.upsert(vectors=[_payload(e) for e in chunk], namespace=ns)
            upserted += getattr(response, "upserted_count", len(chunk))
        return UpsertResult(upserted_count=upserted)

    async def delete(self, ids: list[str], *, namespace: str | None = None) -> DeleteResult:
        await self._handle().delete(ids=ids, namespace=self._ns(namespace))
        # Pinecone does not report how many ids existed.
        return DeleteResult(deleted_count=len(ids))

    async def fetch(
        self,
        ids: list[str],
        *,
        namespace: str | None = None,
    ) -> list[VectorEntry | None]:
        """Fetch *ids* in order; missing ids map to ``None``."""
        response = await self._handle().fetch(ids=ids, namespace=self._ns(namespace))
        found = response.vectors or {}
        return [_entry(found[i]) if i in found else None for i in ids]

    # ------------------------------------------------------------------
    # Namespaces
    # ------------------------------------------------------------------

    async def list_namespaces(self) -> list[str]:
        names: list[str] = []
        async for page in self._handle().list_namespaces():
            names.extend(ns.name for ns in getattr(page, "namespaces", None) or [])
        return names

    async def delete_namespace(self, namespace: str) -> None:
        await self._handle().delete_namespace(namespace)
