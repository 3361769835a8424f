"""Collaborator protocols — what the pipeline needs from an embedder and a vector store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sql2pinecone.search.types import DeleteResult, UpsertResult, VectorEntry


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Turns record text into dense vectors.

    ``embed_batch`` returns exactly one vector per text, positionally
    aligned with its input; the pipeline pairs vectors with records by index.
    """

    @property
    def model_name(self) -> str: ...

    async def embed(self, text: str) -> list[float]: ...

    async def embed_batch(self, texts: list[str]) -> list[list[float]]: ...


@runtime_checkable
class VectorStore(Protocol):
    """A vector index partitioned into namespaces (one per source table).

    ``namespace=None`` means the store's default namespace.  A call that
    fails raises; partial success is not reported.
    """

    @property
    def index_name(self) -> str: ...

    async def connect(self) -> None: ...

    async def close(self) -> None:
        """Release the store's client.  Must be safe to call twice."""
        ...

    async def upsert(
        self, entries: Sequence[VectorEntry], *, namespace: str | None = None
    ) -> UpsertResult: ...

    async def delete(self, ids: list[str], *, namespace: str | None = None) -> DeleteResult: ...

    async def fetch(
        self, ids: list[str], *, namespace: str | None = None
    ) -> list[VectorEntry | None]:
        """Fetch *ids* in order; ids that do not exist come back as ``None``."""
        ...
