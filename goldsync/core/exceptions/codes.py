"""Standardized error codes."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes attached to every goldsync exception."""

    GENERAL_ERROR = "GENERAL_ERROR"
    DATE_PARSE_ERROR = "DATE_PARSE_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CACHE_ERROR = "CACHE_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    PROVIDER_RESPONSE_ERROR = "PROVIDER_RESPONSE_ERROR"


__all__ = ["ErrorCode"]
