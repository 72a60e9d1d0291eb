"""Data models."""

from goldsync.core.models.quotation import QuotationRecord, StoredQuotation
from goldsync.core.models.sync import ResultSource, SyncOutcome, SyncState, WriteOutcome

__all__ = [
    "QuotationRecord",
    "ResultSource",
    "StoredQuotation",
    "SyncOutcome",
    "SyncState",
    "WriteOutcome",
]
