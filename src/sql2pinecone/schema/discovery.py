"""Schema discovery — run a dialect's introspection and return the full schema."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from sql2pinecone.schema.dialects import resolve_dialect
from sql2pinecone.schema.types import schema_to_dict

if TYPE_CHECKING:
    from sql2pinecone.db.connection import DatabaseConnection
    from sql2pinecone.schema.dialects import Dialect
    from sql2pinecone.schema.types import DatabaseSchema

logger = logging.getLogger(__name__)


async def discover_schema(db: DatabaseConnection, dialect: str | Dialect) -> DatabaseSchema:
    """Discover the primary key and text columns of every table in *db*.

    The dialect is resolved before any query is issued, so an unsupported
    name fails without touching the database.  Nothing is cached: each call
    re-reads the catalog.

    Raises:
        UnsupportedDialectError: if *dialect* has no registered variant.
    """
    variant = resolve_dialect(dialect)
    logger.info("Discovering database schema (%s)...", variant.name)
    schema = await variant.discover(db)
    logger.info("Discovered schema: %s", json.dumps(schema_to_dict(schema), indent=2))
    return schema
