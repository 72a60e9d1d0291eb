"""Exception handling module."""

from goldsync.core.exceptions.base import (
    CacheError,
    DataValidationError,
    DateParseError,
    GoldSyncError,
    NetworkError,
    ProviderError,
    ProviderResponseError,
)
from goldsync.core.exceptions.codes import ErrorCode

__all__ = [
    "GoldSyncError",
    "DateParseError",
    "DataValidationError",
    "CacheError",
    "ProviderError",
    "NetworkError",
    "ProviderResponseError",
    "ErrorCode",
]
