"""Remote quotation providers."""

from goldsync.core.providers.sjc import DEFAULT_ENDPOINT, SJCHistoryProvider

__all__ = ["DEFAULT_ENDPOINT", "SJCHistoryProvider"]
