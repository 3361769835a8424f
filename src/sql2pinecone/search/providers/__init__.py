"""Embedding providers."""

from sql2pinecone.search.providers.pinecone import DEFAULT_MODEL, PineconeEmbedding

__all__ = [
    "DEFAULT_MODEL",
    "PineconeEmbedding",
]
