"""goldsync core exception classes."""

from typing import Any

from goldsync.core.exceptions.codes import ErrorCode


class GoldSyncError(Exception):
    """Base class for all goldsync errors."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        """Initialise the error.

        Args:
            message: Human readable message
            error_code: Machine readable error code
            details: Extra diagnostic context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        """Return a serializable payload representing the error."""

        return {"code": self.error_code, "message": self.message, "details": dict(self.details)}


class DateParseError(GoldSyncError):
    """A calendar date string did not match the expected format."""

    def __init__(
        self,
        message: str,
        value: str | None = None,
        expected_format: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if value is not None:
            super_details["value"] = value
        if expected_format is not None:
            super_details["expected_format"] = expected_format
        super().__init__(message, ErrorCode.DATE_PARSE_ERROR.value, super_details)
        self.value = value


class DataValidationError(GoldSyncError):
    """Quotation data failed validation."""

    def __init__(
        self,
        message: str,
        validation_errors: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if validation_errors:
            super_details["validation_errors"] = validation_errors
        super().__init__(message, ErrorCode.VALIDATION_ERROR.value, super_details)
        self.validation_errors = validation_errors or {}


class CacheError(GoldSyncError):
    """Document store read or write failure."""

    def __init__(
        self,
        message: str,
        cache_type: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if cache_type:
            super_details["cache_type"] = cache_type
        super().__init__(message, ErrorCode.CACHE_ERROR.value, super_details)


class ProviderError(GoldSyncError):
    """Remote quotation provider failure."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        error_code: str = ErrorCode.PROVIDER_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details.setdefault("provider", provider_name)
        super().__init__(message, error_code, super_details)
        self.provider_name = provider_name


class NetworkError(ProviderError):
    """Transport failure or non-2xx status from the provider."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, provider_name, ErrorCode.NETWORK_ERROR.value, super_details)
        self.status_code = status_code


class ProviderResponseError(ProviderError):
    """The provider answered, but not with a success envelope holding an array."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, provider_name, ErrorCode.PROVIDER_RESPONSE_ERROR.value, details)
