"""Row mapping — one database row to one embedding-ready record."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sql2pinecone.schema.types import TableSchema


@dataclass(frozen=True, slots=True)
class EmbeddingRecord:
    """A row ready to be embedded and upserted.

    Attributes:
        id: String form of the row's primary-key value.
        text: Space-joined text of the row's text columns.
        metadata: Copy of the row plus the embedding-text field.
    """

    id: str
    text: str
    metadata: dict[str, Any] = field(default_factory=dict)


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def extract_text(row: Mapping[str, Any], table_schema: TableSchema) -> str:
    """Join the row's truthy text-column values with single spaces."""
    values = (row.get(column) for column in table_schema.text_columns)
    return " ".join(_stringify(v) for v in values if v)


def map_row(
    row: Mapping[str, Any],
    table_schema: TableSchema,
    text_field: str,
) -> EmbeddingRecord | None:
    """Map *row* to an :class:`EmbeddingRecord`, or ``None`` when it has no text.

    The returned metadata is a fresh dict, never the row itself.
    """
    text = extract_text(row, table_schema)
    if not text:
        return None

    metadata = dict(row)
    metadata[text_field] = text
    return EmbeddingRecord(
        id=str(row[table_schema.primary_key]),
        text=text,
        metadata=metadata,
    )
