"""Database access — async engine wrapper and dialect URL helpers."""

from sql2pinecone.db.connection import DatabaseConnection
from sql2pinecone.db.dialect import async_url, dialect_name

__all__ = [
    "DatabaseConnection",
    "async_url",
    "dialect_name",
]
