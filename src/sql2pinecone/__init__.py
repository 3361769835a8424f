"""sql2pinecone: embed the rows of any SQL database into a Pinecone index.

Discovers each table's primary key and text columns, streams the rows,
embeds their text with Pinecone Inference, and upserts one namespace per
table.
"""

__version__ = "0.1.0"

from sql2pinecone._migrator import MigrationSummary, migrate, run, sql_to_pinecone
from sql2pinecone.config import MigrationConfig
from sql2pinecone.db.connection import DatabaseConnection
from sql2pinecone.exceptions import (
    ConfigurationError,
    Sql2PineconeError,
    UnsupportedDialectError,
)
from sql2pinecone.pipeline import (
    BATCH_SIZE,
    BatchPipeline,
    EmbeddingRecord,
    NamespaceProcessor,
    TableStats,
    map_row,
)
from sql2pinecone.schema import (
    ColumnMetadataRow,
    DatabaseSchema,
    TableSchema,
    classify_columns,
    discover_schema,
    resolve_dialect,
)
from sql2pinecone.search import (
    EmbeddingProvider,
    PineconeEmbedding,
    PineconeVectorStore,
    VectorEntry,
    VectorStore,
)

__all__ = [
    "BATCH_SIZE",
    "BatchPipeline",
    "ColumnMetadataRow",
    "ConfigurationError",
    "DatabaseConnection",
    "DatabaseSchema",
    "EmbeddingProvider",
    "EmbeddingRecord",
    "MigrationConfig",
    "MigrationSummary",
    "NamespaceProcessor",
    "PineconeEmbedding",
    "PineconeVectorStore",
    "Sql2PineconeError",
    "TableSchema",
    "TableStats",
    "UnsupportedDialectError",
    "VectorEntry",
    "VectorStore",
    "__version__",
    "classify_columns",
    "discover_schema",
    "map_row",
    "migrate",
    "resolve_dialect",
    "run",
    "sql_to_pinecone",
]
