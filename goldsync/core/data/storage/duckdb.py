"""DuckDB backed document store."""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import duckdb
from duckdb import DuckDBPyConnection

from goldsync.core.data.schema import DOCUMENT_FIELDS, GOLD_PRICE_HISTORY_TABLE, TableSchema, quote_identifier
from goldsync.core.data.storage.base import DocumentStore
from goldsync.core.exceptions import CacheError

_COLLECTION_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DuckDBDocumentStore(DocumentStore):
    """Persists quotation documents in one DuckDB table keyed by document id."""

    def __init__(self, db_path: str = ":memory:", collection: str = GOLD_PRICE_HISTORY_TABLE.name):
        self._conn: DuckDBPyConnection | None = None
        if not _COLLECTION_NAME.match(collection):
            raise ValueError(f"invalid collection name: {collection!r}")
        self.db_path = db_path
        self.schema: TableSchema = GOLD_PRICE_HISTORY_TABLE.named(collection)
        self._init_database()

    def _init_database(self) -> None:
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = duckdb.connect(self.db_path)
        self.schema.ensure(self._conn)

    @property
    def connection(self) -> DuckDBPyConnection:
        if self._conn is None:
            raise CacheError("document store is closed", cache_type="duckdb")
        return self._conn

    def _select_sql(self) -> str:
        columns = ", ".join(quote_identifier(name) for name in ("id", *DOCUMENT_FIELDS))
        return f"SELECT {columns} FROM {self.schema.name}"

    def _rows_to_documents(self, rows: list[tuple[Any, ...]]) -> list[dict[str, Any]]:
        columns = ("id", *DOCUMENT_FIELDS)
        return [dict(zip(columns, row, strict=True)) for row in rows]

    async def query_range(self, lower: str, upper: str) -> list[dict[str, Any]]:
        """Inclusive range query on the ``date`` field, ascending."""
        try:
            rows = self.connection.execute(
                f'{self._select_sql()} WHERE "date" >= ? AND "date" <= ? ORDER BY "date" ASC, "id" ASC',
                [lower, upper],
            ).fetchall()
        except duckdb.Error as exc:
            raise CacheError(f"range query failed: {exc}", cache_type="duckdb") from exc
        return self._rows_to_documents(rows)

    async def commit_batch(self, documents: Mapping[str, Mapping[str, Any]]) -> int:
        """Upsert ``documents`` inside one transaction; roll back on any failure."""
        if not documents:
            return 0

        columns = ", ".join(quote_identifier(name) for name in ("id", *DOCUMENT_FIELDS))
        placeholders = ", ".join(["?"] * (len(DOCUMENT_FIELDS) + 1))
        insert_sql = f"INSERT OR REPLACE INTO {self.schema.name} ({columns}) VALUES ({placeholders})"
        parameters = [
            [document_id, *(document.get(name) for name in DOCUMENT_FIELDS)]
            for document_id, document in documents.items()
        ]

        conn = self.connection
        conn.begin()
        try:
            conn.executemany(insert_sql, parameters)
            conn.commit()
        except duckdb.Error as exc:
            conn.rollback()
            raise CacheError(
                f"batch commit failed: {exc}",
                cache_type="duckdb",
                details={"documents": len(parameters)},
            ) from exc
        return len(parameters)

    async def get(self, document_id: str) -> dict[str, Any] | None:
        try:
            rows = self.connection.execute(f'{self._select_sql()} WHERE "id" = ?', [document_id]).fetchall()
        except duckdb.Error as exc:
            raise CacheError(f"lookup failed: {exc}", cache_type="duckdb") from exc
        documents = self._rows_to_documents(rows)
        return documents[0] if documents else None

    async def count(self) -> int:
        result = self.connection.execute(f"SELECT COUNT(*) FROM {self.schema.name}").fetchone()
        return int(result[0]) if result else 0

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __del__(self) -> None:
        self.close()
