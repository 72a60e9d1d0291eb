"""SJC formatted gold price history provider.

Calls ``GET {base_url}{endpoint}?fromDate=dd/MM/yyyy&toDate=dd/MM/yyyy`` and
expects ``{"success": true, "data": [QuotationRecord, ...]}``. Every other
answer is a failure: nothing partial is ever returned.
"""

from __future__ import annotations

from datetime import tzinfo
from typing import Any

import httpx
from pydantic import ValidationError

from goldsync.core.data.codec import DEFAULT_TZ
from goldsync.core.exceptions import NetworkError, ProviderResponseError
from goldsync.core.models import QuotationRecord

DEFAULT_ENDPOINT = "/api/sjc/formatted"


class SJCHistoryProvider:
    """Remote refiller backed by the formatted SJC history endpoint."""

    name = "SJC"

    def __init__(
        self,
        base_url: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
        tz: tzinfo | None = None,
    ):
        if not base_url:
            raise ValueError("base_url cannot be empty")
        self.base_url = base_url
        self.endpoint = endpoint
        self.timeout = timeout
        self.tz = tz or DEFAULT_TZ
        self._client = client
        self._owns_client = client is None

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.endpoint.lstrip('/')}"

    async def __aenter__(self) -> SJCHistoryProvider:
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers={"Accept": "application/json", "User-Agent": "goldsync/0.1.0"},
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, from_date: str, to_date: str) -> list[QuotationRecord]:
        """Fetch the raw series for ``[from_date, to_date]``.

        Raises:
            NetworkError: transport failure or non-2xx status
            ProviderResponseError: body is not a success envelope holding valid records
        """
        client = self._ensure_client()
        try:
            response = await client.get(self.url, params={"fromDate": from_date, "toDate": to_date})
        except httpx.HTTPError as exc:
            raise NetworkError(f"Request to {self.name} failed: {exc}", provider_name=self.name) from exc

        if not response.is_success:
            raise NetworkError(
                f"Failed to fetch history: HTTP {response.status_code}",
                provider_name=self.name,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderResponseError("Response body is not JSON", provider_name=self.name) from exc

        return self._parse_envelope(payload)

    def _parse_envelope(self, payload: Any) -> list[QuotationRecord]:
        if not isinstance(payload, dict) or payload.get("success") is not True:
            raise ProviderResponseError(
                "Provider reported failure",
                provider_name=self.name,
                details={"success": payload.get("success") if isinstance(payload, dict) else None},
            )
        data = payload.get("data")
        if not isinstance(data, list):
            raise ProviderResponseError(
                "Provider data is not an array",
                provider_name=self.name,
                details={"data_type": type(data).__name__},
            )
        try:
            return [QuotationRecord.model_validate(item, context={"tz": self.tz}) for item in data]
        except ValidationError as exc:
            raise ProviderResponseError(
                "Provider returned malformed records",
                provider_name=self.name,
                details={"errors": exc.errors(include_url=False, include_context=False)},
            ) from exc
