"""Document store implementations."""

from goldsync.core.data.storage.base import DocumentStore
from goldsync.core.data.storage.duckdb import DuckDBDocumentStore

__all__ = ["DocumentStore", "DuckDBDocumentStore"]
