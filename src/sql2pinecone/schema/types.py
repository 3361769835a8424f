"""Schema data types — column metadata rows and the canonical per-table schema."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# ------------------------------------------------------------------
# Raw introspection rows
# ------------------------------------------------------------------


def _as_str(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return "" if value is None else str(value)


@dataclass(frozen=True, slots=True)
class ColumnMetadataRow:
    """One column as reported by a dialect's catalog query.

    Attributes:
        table_name: Table owning the column.
        column_name: Column name.
        data_type: Type name exactly as the dialect reports it.
        is_primary_key: ``"YES"`` when the column belongs to the primary key,
            ``"NO"`` otherwise.
    """

    table_name: str
    column_name: str
    data_type: str
    is_primary_key: str = "NO"

    @property
    def primary(self) -> bool:
        return self.is_primary_key == "YES"

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> ColumnMetadataRow:
        """Build a row from a driver mapping.

        Keys are matched case-insensitively since MySQL 8 reports catalog
        columns in upper case.  ``bytes`` values are decoded.
        """
        lowered = {str(k).lower(): v for k, v in row.items()}
        return cls(
            table_name=_as_str(lowered.get("table_name")),
            column_name=_as_str(lowered.get("column_name")),
            data_type=_as_str(lowered.get("data_type")),
            is_primary_key=_as_str(lowered.get("is_primary_key")) or "NO",
        )


# ------------------------------------------------------------------
# Canonical schema
# ------------------------------------------------------------------


@dataclass(slots=True)
class TableSchema:
    """Primary key and embeddable text columns of one table.

    Attributes:
        primary_key: First discovered primary-key column, or ``None``.
        text_columns: Text-bearing columns in discovery order.
    """

    primary_key: str | None = None
    text_columns: list[str] = field(default_factory=list)

    @property
    def skip_reason(self) -> str | None:
        """Why the table cannot be migrated, or ``None`` when it is eligible."""
        if not self.primary_key:
            return "No primary key found."
        if not self.text_columns:
            return "No text columns found."
        return None

    @property
    def eligible(self) -> bool:
        return self.skip_reason is None

    def to_dict(self) -> dict[str, Any]:
        return {"primaryKey": self.primary_key, "textColumns": list(self.text_columns)}


DatabaseSchema = dict[str, TableSchema]


def schema_to_dict(schema: DatabaseSchema) -> dict[str, dict[str, Any]]:
    """Render *schema* as plain dicts (for logging)."""
    return {name: table.to_dict() for name, table in schema.items()}
