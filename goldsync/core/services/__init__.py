"""Services: integrity validation, reconciliation and presentation state."""

from goldsync.core.services.feed import FeedSnapshot, HistoryFeed
from goldsync.core.services.history import HistorySyncService, Refiller
from goldsync.core.services.integrity import MAX_VALID_GOLD_PRICE, IntegrityReport, IntegrityValidator

__all__ = [
    "FeedSnapshot",
    "HistoryFeed",
    "HistorySyncService",
    "IntegrityReport",
    "IntegrityValidator",
    "MAX_VALID_GOLD_PRICE",
    "Refiller",
]
