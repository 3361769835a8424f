"""Custom exception hierarchy for sql2pinecone."""


class Sql2PineconeError(Exception):
    """Base exception for all sql2pinecone errors."""


class UnsupportedDialectError(Sql2PineconeError):
    """Raised when no dialect variant matches the requested database client."""


class ConfigurationError(Sql2PineconeError, ValueError):
    """Raised when a migration is configured with missing or invalid values."""
