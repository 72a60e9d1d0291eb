"""Integrity validation for cached quotation series."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from goldsync.core.models import QuotationRecord

# Implausible for a VND per-tael gold quote; prices above it come from
# unit-confused writes (e.g. a per-chi feed scaled as per-tael).
MAX_VALID_GOLD_PRICE = 200_000_000


@dataclass(frozen=True)
class IntegrityReport:
    """Outcome of inspecting one cached series."""

    record_count: int
    outlier_count: int
    max_price: float
    threshold: float

    @property
    def suspect(self) -> bool:
        return self.outlier_count > 0


class IntegrityValidator:
    """Vetoes a whole series when any record exceeds the price threshold."""

    def __init__(self, max_valid_price: float = MAX_VALID_GOLD_PRICE):
        if max_valid_price <= 0:
            raise ValueError("max_valid_price must be positive")
        self.max_valid_price = max_valid_price

    def _is_outlier(self, record: QuotationRecord) -> bool:
        return record.buy > self.max_valid_price or record.sell > self.max_valid_price

    def is_suspect(self, series: Sequence[QuotationRecord]) -> bool:
        """True if any record has ``buy`` or ``sell`` strictly above the threshold."""
        if not series:
            raise ValueError("cannot validate an empty series")
        return any(self._is_outlier(record) for record in series)

    def find_outliers(self, series: Sequence[QuotationRecord]) -> list[QuotationRecord]:
        return [record for record in series if self._is_outlier(record)]

    def inspect(self, series: Sequence[QuotationRecord]) -> IntegrityReport:
        if not series:
            raise ValueError("cannot validate an empty series")
        return IntegrityReport(
            record_count=len(series),
            outlier_count=len(self.find_outliers(series)),
            max_price=max(record.max_price() for record in series),
            threshold=self.max_valid_price,
        )
