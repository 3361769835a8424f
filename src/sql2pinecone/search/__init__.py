"""Vector search layer — embedding provider and vector store for Pinecone."""

from sql2pinecone.search.protocols import EmbeddingProvider, VectorStore
from sql2pinecone.search.providers.pinecone import PineconeEmbedding
from sql2pinecone.search.stores.pinecone import PineconeVectorStore
from sql2pinecone.search.types import DeleteResult, UpsertResult, VectorEntry

__all__ = [
    "DeleteResult",
    "EmbeddingProvider",
    "PineconeEmbedding",
    "PineconeVectorStore",
    "UpsertResult",
    "VectorEntry",
    "VectorStore",
]
