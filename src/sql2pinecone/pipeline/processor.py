"""NamespaceProcessor — embed, upsert, delete and fetch within one namespace."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sql2pinecone.search.types import VectorEntry

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sql2pinecone.pipeline.records import EmbeddingRecord
    from sql2pinecone.search.protocols import EmbeddingProvider, VectorStore
    from sql2pinecone.search.types import DeleteResult, UpsertResult

logger = logging.getLogger(__name__)


class NamespaceProcessor:
    """Binds a :class:`VectorStore` and an :class:`EmbeddingProvider` to one namespace.

    ``upsert`` failures propagate to the caller.  ``delete`` and ``get`` log
    and swallow failures, returning ``None``.
    """

    def __init__(
        self,
        store: VectorStore,
        embedder: EmbeddingProvider,
        namespace: str,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    async def upsert(self, records: Sequence[EmbeddingRecord]) -> UpsertResult | None:
        """Embed every record's text in one call and upsert the vectors in one call.

        Vectors are paired with records by position.
        """
        if not records:
            return None

        texts = [r.text for r in records]
        vectors = await self._embedder.embed_batch(texts)

        entries = [
            VectorEntry(id=record.id, vector=vectors[i], metadata=record.metadata)
            for i, record in enumerate(records)
        ]
        return await self._store.upsert(entries, namespace=self._namespace)

    async def delete(self, ids: list[str]) -> DeleteResult | None:
        """Delete vectors by ID; failures are logged, not raised."""
        try:
            return await self._store.delete(ids, namespace=self._namespace)
        except Exception as e:
            logger.error("Error deleting records from %s: %s", self._namespace, e, exc_info=True)
            return None

    async def get(self, ids: list[str]) -> list[VectorEntry | None] | None:
        """Fetch vectors by ID; failures are logged, not raised."""
        try:
            return await self._store.fetch(ids, namespace=self._namespace)
        except Exception as e:
            logger.error("Error fetching records from %s: %s", self._namespace, e, exc_info=True)
            return None
