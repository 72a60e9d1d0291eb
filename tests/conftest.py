"""Pytest configuration for the goldsync test suite."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from goldsync.core.data.codec import RangeQueryCodec
from goldsync.core.data.storage import DuckDBDocumentStore
from goldsync.core.logging import logger
from goldsync.core.models import QuotationRecord

VN_TZ = ZoneInfo("Asia/Ho_Chi_Minh")


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--goldsync-run-integration",
        action="store_true",
        default=False,
        help="Run goldsync integration tests that require external services.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register the integration marker for goldsync tests."""

    config.addinivalue_line(
        "markers",
        "integration: marks goldsync tests requiring network or external services",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--goldsync-run-integration"):
        return

    goldsync_skip_integration = pytest.mark.skip(
        reason="integration tests require --goldsync-run-integration",
    )
    for goldsync_item in items:
        if "integration" in goldsync_item.keywords:
            goldsync_item.add_marker(goldsync_skip_integration)


def _make_record(day: int, *, hour: int = 9, sell: float = 92_100_000, buy: float | None = None, type: str = "SJC_1L") -> QuotationRecord:
    """Build a January 2026 quotation at ``hour`` local time."""

    moment = datetime(2026, 1, day, hour, 0, 0, tzinfo=VN_TZ)
    return QuotationRecord(
        date=moment.isoformat(),
        type=type,
        buy=buy if buy is not None else sell - 2_000_000,
        sell=sell,
    )


@pytest.fixture
def make_record():
    return _make_record


@pytest.fixture
def codec() -> RangeQueryCodec:
    return RangeQueryCodec(VN_TZ)


@pytest.fixture
def store() -> Iterator[DuckDBDocumentStore]:
    document_store = DuckDBDocumentStore(":memory:")
    yield document_store
    document_store.close()


@pytest.fixture
def log_messages() -> Iterator[list[dict[str, object]]]:
    """Collect ``{"level", "message", "extra"}`` for every log event."""

    captured: list[dict[str, object]] = []

    def sink(message: object) -> None:
        record = message.record  # type: ignore[attr-defined]
        captured.append({"level": record["level"].name, "message": record["message"], "extra": dict(record["extra"])})

    handler_id = logger.add(sink, level="DEBUG")
    yield captured
    logger.remove(handler_id)
