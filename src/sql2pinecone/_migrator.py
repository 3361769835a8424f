"""Migration driver — discover the schema, then migrate every table in order."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sql2pinecone.config import MigrationConfig
from sql2pinecone.db.connection import DatabaseConnection
from sql2pinecone.exceptions import ConfigurationError
from sql2pinecone.pipeline.batching import BatchPipeline
from sql2pinecone.schema.discovery import discover_schema
from sql2pinecone.search.providers.pinecone import PineconeEmbedding
from sql2pinecone.search.stores.pinecone import PineconeVectorStore

if TYPE_CHECKING:
    from sql2pinecone.pipeline.batching import TableStats
    from sql2pinecone.search.protocols import EmbeddingProvider, VectorStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MigrationSummary:
    """Per-table results of a migration run, in processing order."""

    tables: dict[str, TableStats] = field(default_factory=dict)

    @property
    def migrated(self) -> list[str]:
        return [name for name, stats in self.tables.items() if not stats.skipped]

    @property
    def skipped(self) -> dict[str, str]:
        return {
            name: stats.skip_reason
            for name, stats in self.tables.items()
            if stats.skip_reason is not None
        }

    @property
    def records(self) -> int:
        return sum(stats.records for stats in self.tables.values())


async def migrate(
    config: MigrationConfig,
    *,
    db: DatabaseConnection | None = None,
    store: VectorStore | None = None,
    embedder: EmbeddingProvider | None = None,
) -> MigrationSummary:
    """Embed every row of every eligible table into the configured index.

    Collaborators not passed in are built from *config*: a
    :class:`DatabaseConnection`, a :class:`PineconeVectorStore`, and a
    :class:`PineconeEmbedding` sharing the store's client.  Tables are
    processed one after another.  Only the settings of collaborators built
    here are required.  Any failure, including a bad configuration, is
    logged once and re-raised; whatever database connection and vector
    store exist are closed either way.
    """
    summary = MigrationSummary()
    try:
        if db is None or store is None:
            config.validate(database=db is None, vector_store=store is None)
        if db is None:
            db = DatabaseConnection.from_config(config)
        if store is None:
            store = PineconeVectorStore(
                index_name=config.index_name, api_key=config.pinecone_api_key
            )

        await store.connect()
        if embedder is None:
            embedder = _shared_embedder(store, config)

        schema = await discover_schema(db, config.dialect or db.dialect_name)

        logger.info("Starting data migration...")
        pipeline = BatchPipeline(
            db,
            store,
            embedder,
            text_field=config.embedding_text_field,
            batch_size=config.batch_size,
        )
        for table_name, table_schema in schema.items():
            summary.tables[table_name] = await pipeline.run(table_name, table_schema)
    except Exception:
        logger.exception("Error during processing")
        raise
    finally:
        await _teardown(db, store)

    return summary


def _shared_embedder(store: VectorStore, config: MigrationConfig) -> PineconeEmbedding:
    """Embed with the Pinecone client the connected *store* already holds."""
    client = getattr(store, "client", None)
    if client is None:
        msg = (
            f"{type(store).__name__} has no Pinecone client to share; "
            "pass an embedder to migrate()."
        )
        raise ConfigurationError(msg)
    return PineconeEmbedding(client=client, model=config.embedding_model)


async def _teardown(db: DatabaseConnection | None, store: VectorStore | None) -> None:
    """Close the database, then the store, even if closing the database fails."""
    try:
        if db is not None:
            await db.close()
            logger.info("Database connection closed.")
    finally:
        if store is not None:
            await store.close()


async def sql_to_pinecone(
    dialect: str,
    connection_string: str,
    pinecone_api_key: str,
    index_name: str,
    embedding_text_field: str,
    **options: Any,
) -> MigrationSummary:
    """Migrate a database into a Pinecone index in one call.

    Extra keyword *options* are :class:`MigrationConfig` fields
    (``sqlite_file``, ``embedding_model``, ``batch_size``).
    """
    config = MigrationConfig.create(
        dialect=dialect,
        connection_string=connection_string,
        pinecone_api_key=pinecone_api_key,
        index_name=index_name,
        embedding_text_field=embedding_text_field,
        **options,
    )
    return await migrate(config)


def run(config: MigrationConfig) -> MigrationSummary:
    """Synchronous entry point: run :func:`migrate` on a fresh event loop."""
    return asyncio.run(migrate(config))
