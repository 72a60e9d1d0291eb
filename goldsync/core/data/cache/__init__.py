"""Cache reader and writer over the document store."""

from goldsync.core.data.cache.reader import CacheReader
from goldsync.core.data.cache.writer import DEFAULT_PROVIDER_TAG, CacheWriter

__all__ = ["CacheReader", "CacheWriter", "DEFAULT_PROVIDER_TAG"]
