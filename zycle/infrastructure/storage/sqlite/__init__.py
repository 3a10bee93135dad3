"""SQLite storage implementations."""

from zycle.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)
from zycle.infrastructure.storage.sqlite.document_store import SQLiteDocumentStore

# Singleton instance
_document_store: SQLiteDocumentStore | None = None


async def get_document_store() -> SQLiteDocumentStore:
    """Get singleton document store instance."""
    global _document_store
    if _document_store is None:
        _document_store = SQLiteDocumentStore()
    return _document_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    # Stores
    "SQLiteDocumentStore",
    "get_document_store",
]
