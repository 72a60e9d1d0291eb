"""Tests for quotation and sync models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from goldsync.core.models import QuotationRecord, StoredQuotation, SyncOutcome, SyncState, WriteOutcome


def test_date_is_normalized_to_canonical_utc():
    record = QuotationRecord(date="2026-01-30T09:00:00+07:00", type="SJC_1L", buy=90_000_000, sell=92_000_000)
    assert record.date == "2026-01-30T02:00:00.000Z"


@pytest.mark.parametrize("date", ["30/01/2026", "yesterday", ""])
def test_rejects_non_iso_dates(date):
    with pytest.raises(ValidationError):
        QuotationRecord(date=date, type="SJC_1L", buy=1, sell=1)


def test_rejects_negative_prices():
    with pytest.raises(ValidationError):
        QuotationRecord(date="2026-01-30T02:00:00Z", type="SJC_1L", buy=-1, sell=1)


def test_ignores_stored_provenance_fields():
    record = QuotationRecord.model_validate(
        {"date": "2026-01-30T02:00:00.000Z", "type": "SJC_1L", "buy": 1, "sell": 2, "provider": "SJC", "syncedAt": "x"}
    )
    assert record.model_dump() == {"date": "2026-01-30T02:00:00.000Z", "type": "SJC_1L", "buy": 1.0, "sell": 2.0}


def test_stored_quotation_document_uses_synced_at_alias():
    stored = StoredQuotation(date="2026-01-30T02:00:00Z", type="SJC_1L", buy=1, sell=2, provider="SJC", synced_at="2026-02-01T00:00:00.000Z")

    assert stored.to_document()["syncedAt"] == "2026-02-01T00:00:00.000Z"
    assert QuotationRecord.model_validate(stored.to_document()) == QuotationRecord(date="2026-01-30T02:00:00Z", type="SJC_1L", buy=1, sell=2)


def test_terminal_states():
    assert {state for state in SyncState if state.is_terminal} == {
        SyncState.SERVING_CACHED,
        SyncState.SERVING_FRESH,
        SyncState.FAILED,
    }


def test_outcome_flags():
    failed = SyncOutcome(from_date="01/01/2026", to_date="05/01/2026", state=SyncState.FAILED)
    assert failed.published is False
    assert failed.succeeded is False
    assert failed.write.succeeded is False

    write = WriteOutcome(attempted=True, written=3)
    served = SyncOutcome(from_date="01/01/2026", to_date="05/01/2026", state=SyncState.SERVING_FRESH, records=(), write=write)
    assert served.published is True
    assert served.write.succeeded is True
