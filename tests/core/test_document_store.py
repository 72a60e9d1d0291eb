"""Tests for the DuckDB document store."""

from __future__ import annotations

import duckdb
import pytest

from goldsync.core.data.schema import GOLD_PRICE_HISTORY_TABLE
from goldsync.core.data.storage import DuckDBDocumentStore
from goldsync.core.exceptions import CacheError


def _document(date: str, sell: float = 92_100_000, type: str = "SJC_1L") -> dict[str, object]:
    return {
        "date": date,
        "type": type,
        "buy": sell - 2_000_000,
        "sell": sell,
        "provider": "SJC",
        "syncedAt": "2026-01-06T00:00:00.000Z",
    }


def test_table_structure():
    conn = duckdb.connect(database=":memory:")

    GOLD_PRICE_HISTORY_TABLE.ensure(conn)

    columns = conn.execute("PRAGMA table_info('gold_price_history')").fetchall()
    assert [row[1] for row in columns] == ["id", "date", "type", "buy", "sell", "provider", "syncedAt"]
    assert [row[1] for row in columns if row[5]] == ["id"]


@pytest.mark.asyncio
async def test_empty_store_returns_empty_range(store):
    assert await store.query_range("2026-01-01T00:00:00.000Z", "2026-12-31T23:59:59.999Z") == []
    assert await store.count() == 0


@pytest.mark.asyncio
async def test_query_range_is_inclusive_and_ascending(store):
    await store.commit_batch(
        {
            "c": _document("2026-01-03T02:00:00.000Z"),
            "a": _document("2026-01-01T00:00:00.000Z"),
            "b": _document("2026-01-02T02:00:00.000Z"),
            "z": _document("2026-01-04T00:00:00.001Z"),
        }
    )

    documents = await store.query_range("2026-01-01T00:00:00.000Z", "2026-01-04T00:00:00.000Z")

    assert [document["id"] for document in documents] == ["a", "b", "c"]
    assert documents[0]["syncedAt"] == "2026-01-06T00:00:00.000Z"


@pytest.mark.asyncio
async def test_commit_batch_upserts_by_id(store):
    await store.commit_batch({"SJC_1L_20260102_090000": _document("2026-01-02T02:00:00.000Z", sell=520_000_000)})
    await store.commit_batch({"SJC_1L_20260102_090000": _document("2026-01-02T02:00:00.000Z", sell=92_100_000)})

    assert await store.count() == 1
    document = await store.get("SJC_1L_20260102_090000")
    assert document is not None
    assert document["sell"] == 92_100_000


@pytest.mark.asyncio
async def test_failed_batch_writes_nothing(store):
    broken = _document("2026-01-03T02:00:00.000Z")
    broken["buy"] = None

    with pytest.raises(CacheError) as exc_info:
        await store.commit_batch({"ok": _document("2026-01-02T02:00:00.000Z"), "broken": broken})

    assert exc_info.value.error_code == "CACHE_ERROR"
    assert exc_info.value.details["documents"] == 2
    assert await store.count() == 0

    # The connection stays usable after the rollback.
    assert await store.commit_batch({"ok": _document("2026-01-02T02:00:00.000Z")}) == 1


@pytest.mark.asyncio
async def test_empty_batch_is_noop(store):
    assert await store.commit_batch({}) == 0


@pytest.mark.asyncio
async def test_persists_across_connections(tmp_path):
    db_path = str(tmp_path / "nested" / "history.duckdb")
    first = DuckDBDocumentStore(db_path)
    await first.commit_batch({"a": _document("2026-01-02T02:00:00.000Z")})
    first.close()

    second = DuckDBDocumentStore(db_path)
    try:
        assert await second.get("a") is not None
    finally:
        second.close()


@pytest.mark.asyncio
async def test_custom_collection(tmp_path):
    custom = DuckDBDocumentStore(":memory:", collection="gold_history_test")
    try:
        await custom.commit_batch({"a": _document("2026-01-02T02:00:00.000Z")})
        assert await custom.count() == 1
        assert custom.schema.name == "gold_history_test"
    finally:
        custom.close()


def test_rejects_unsafe_collection_name():
    with pytest.raises(ValueError, match="invalid collection name"):
        DuckDBDocumentStore(":memory:", collection="history; DROP TABLE x")


@pytest.mark.asyncio
async def test_closed_store_raises_cache_error():
    closed = DuckDBDocumentStore(":memory:")
    closed.close()
    with pytest.raises(CacheError):
        await closed.query_range("a", "b")
