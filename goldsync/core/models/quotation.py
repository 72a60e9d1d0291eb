"""Quotation data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from goldsync.core.data.codec import normalize_iso
from goldsync.core.exceptions import DateParseError


class QuotationRecord(BaseModel):
    """One buy/sell price pair for a given date and series type.

    ``date`` is normalized to canonical UTC ISO-8601 on validation. Naive
    timestamps are read in the timezone passed as validation context
    (``{"tz": ...}``), falling back to the default market timezone.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    date: str
    type: str = Field(min_length=1)
    buy: float = Field(ge=0)
    sell: float = Field(ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value: object, info: ValidationInfo) -> str:
        if not isinstance(value, str):
            raise ValueError("date must be an ISO-8601 string")
        tz = (info.context or {}).get("tz")
        try:
            return normalize_iso(value, tz)
        except DateParseError as exc:
            raise ValueError(exc.message) from exc

    def max_price(self) -> float:
        return max(self.buy, self.sell)


class StoredQuotation(QuotationRecord):
    """A quotation as persisted in the document store, with provenance."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    provider: str
    synced_at: str = Field(alias="syncedAt")

    def to_document(self) -> dict[str, object]:
        """Serialize with the stored field names (``syncedAt``)."""
        return self.model_dump(by_alias=True)
