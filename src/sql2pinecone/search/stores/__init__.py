"""Vector stores — VectorStore protocol implementations."""

from sql2pinecone.search.stores.pinecone import PineconeVectorStore, to_pinecone_metadata

__all__ = [
    "PineconeVectorStore",
    "to_pinecone_metadata",
]
