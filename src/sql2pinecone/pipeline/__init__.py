"""Migration pipeline — row mapping, namespace processing, and batching."""

from sql2pinecone.pipeline.batching import BATCH_SIZE, BatchPipeline, TableStats
from sql2pinecone.pipeline.processor import NamespaceProcessor
from sql2pinecone.pipeline.records import EmbeddingRecord, extract_text, map_row

__all__ = [
    "BATCH_SIZE",
    "BatchPipeline",
    "EmbeddingRecord",
    "NamespaceProcessor",
    "TableStats",
    "extract_text",
    "map_row",
]
