"""goldsync - cached gold price history.

Serves daily gold quotations for a calendar range from a local document
cache, refilling the cache from the formatted SJC endpoint whenever it is
empty or fails the integrity check.
"""

from goldsync.core.config import ConfigManager, GoldSyncConfig
from goldsync.core.models import QuotationRecord, ResultSource, SyncOutcome, SyncState
from goldsync.core.services import HistoryFeed, HistorySyncService, IntegrityValidator

__version__ = "0.1.0"


async def fetch_history(from_date: str, to_date: str, config: GoldSyncConfig | None = None) -> SyncOutcome:
    """Run one reconciliation for ``dd/MM/yyyy`` bounds with a configured service."""
    config = config or ConfigManager().get_config()
    async with HistorySyncService.from_config(config) as service:
        return await service.sync(from_date, to_date)


__all__ = [
    "ConfigManager",
    "GoldSyncConfig",
    "HistoryFeed",
    "HistorySyncService",
    "IntegrityValidator",
    "QuotationRecord",
    "ResultSource",
    "SyncOutcome",
    "SyncState",
    "fetch_history",
]
