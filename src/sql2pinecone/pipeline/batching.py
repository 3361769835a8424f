"""BatchPipeline — stream a table's rows into fixed-size embed/upsert batches."""

from __future__ import annotations

import logging
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sql2pinecone.pipeline.processor import NamespaceProcessor
from sql2pinecone.pipeline.records import map_row

if TYPE_CHECKING:
    from sql2pinecone.db.connection import DatabaseConnection
    from sql2pinecone.pipeline.records import EmbeddingRecord
    from sql2pinecone.schema.types import TableSchema
    from sql2pinecone.search.protocols import EmbeddingProvider, VectorStore

logger = logging.getLogger(__name__)

BATCH_SIZE = 100


@dataclass(slots=True)
class TableStats:
    """Outcome of one table's pass through the pipeline.

    Attributes:
        table: Table name (also the namespace).
        skip_reason: Why the table was skipped, or ``None`` if it ran.
        rows_read: Rows pulled from the stream.
        rows_skipped: Rows that produced no text.
        batch_sizes: Size of each flushed batch, in flush order.
    """

    table: str
    skip_reason: str | None = None
    rows_read: int = 0
    rows_skipped: int = 0
    batch_sizes: list[int] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.skip_reason is not None

    @property
    def flushes(self) -> int:
        return len(self.batch_sizes)

    @property
    def records(self) -> int:
        return sum(self.batch_sizes)


class BatchPipeline:
    """Runs tables through map -> batch -> embed -> upsert, one table at a time.

    A batch is flushed when it reaches *batch_size* records and once more at
    the end of the stream if anything is left.  The next row is not read
    until the current flush has completed.  Each table upserts into the
    namespace named after it.
    """

    def __init__(
        self,
        db: DatabaseConnection,
        store: VectorStore,
        embedder: EmbeddingProvider,
        *,
        text_field: str,
        batch_size: int = BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            msg = f"batch_size must be positive, got {batch_size}"
            raise ValueError(msg)
        self._db = db
        self._store = store
        self._embedder = embedder
        self._text_field = text_field
        self._batch_size = batch_size

    def processor_for(self, table_name: str) -> NamespaceProcessor:
        return NamespaceProcessor(self._store, self._embedder, namespace=table_name)

    async def run(self, table_name: str, table_schema: TableSchema) -> TableStats:
        """Migrate every row of *table_name*.

        Ineligible tables (no primary key or no text columns) are logged and
        skipped before any row is read.
        """
        stats = TableStats(table=table_name)

        if not table_schema.eligible:
            stats.skip_reason = table_schema.skip_reason
            logger.warning("Skipping table '%s': %s", table_name, stats.skip_reason)
            return stats

        processor = self.processor_for(table_name)
        logger.info("Processing table '%s' into namespace '%s'...", table_name, table_name)

        batch: list[EmbeddingRecord] = []
        async with aclosing(self._db.stream_rows(table_name)) as rows:
            async for row in rows:
                stats.rows_read += 1
                record = map_row(row, table_schema, self._text_field)
                if record is None:
                    stats.rows_skipped += 1
                    continue

                batch.append(record)
                if len(batch) >= self._batch_size:
                    await self._flush(processor, batch, stats, final=False)
                    batch = []

        if batch:
            await self._flush(processor, batch, stats, final=True)

        logger.info(
            "Finished processing table '%s': %d records in %d batches (%d rows without text).",
            table_name,
            stats.records,
            stats.flushes,
            stats.rows_skipped,
        )
        return stats

    async def _flush(
        self,
        processor: NamespaceProcessor,
        batch: list[EmbeddingRecord],
        stats: TableStats,
        *,
        final: bool,
    ) -> None:
        logger.info(
            "Embedding and upserting %sbatch of %d to namespace '%s'",
            "final " if final else "",
            len(batch),
            processor.namespace,
        )
        await processor.upsert(batch)
        stats.batch_sizes.append(len(batch))
