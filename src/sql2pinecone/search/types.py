"""Vector store value types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class VectorEntry:
    """One embedded row as sent to (or fetched from) the store.

    Attributes:
        id: The row's primary-key value as a string.
        vector: Embedding of the row's text.
        metadata: Row columns plus the embedding-text field.
    """

    id: str
    vector: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class UpsertResult:
    upserted_count: int


@dataclass(frozen=True, slots=True)
class DeleteResult:
    # Number of ids sent; Pinecone does not report how many existed.
    deleted_count: int
