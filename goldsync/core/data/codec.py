"""Range query codec.

Translates ``dd/MM/yyyy`` calendar ranges into inclusive ISO-8601 bounds for the
document store's ``date`` field and defines the deterministic document
identifier scheme ``{type}_{yyyyMMdd_HHmmss}``.

Every timestamp that reaches the store is rendered in one canonical form,
``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC, so plain string comparison is
chronological comparison.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from goldsync.core.config.settings import DEFAULT_TIMEZONE
from goldsync.core.exceptions import DateParseError

if TYPE_CHECKING:
    from goldsync.core.models import QuotationRecord

DATE_INPUT_FORMAT = "%d/%m/%Y"
DOCUMENT_KEY_FORMAT = "%Y%m%d_%H%M%S"
DEFAULT_TZ: tzinfo = ZoneInfo(DEFAULT_TIMEZONE)

_END_OF_DAY = time(23, 59, 59, 999000)
_CALENDAR_DATE = re.compile(r"[0-9]{2}/[0-9]{2}/[0-9]{4}")


def format_iso(moment: datetime) -> str:
    """Render an aware datetime in canonical UTC millisecond form."""
    utc = moment.astimezone(timezone.utc)
    return f"{utc.strftime('%Y-%m-%dT%H:%M:%S')}.{utc.microsecond // 1000:03d}Z"


def parse_iso(value: str, tz: tzinfo | None = None) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are read in ``tz``."""
    try:
        moment = datetime.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise DateParseError(f"Invalid ISO-8601 timestamp: {value!r}", value=str(value), expected_format="ISO-8601") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=tz or DEFAULT_TZ)
    return moment


def normalize_iso(value: str, tz: tzinfo | None = None) -> str:
    """Return ``value`` in canonical form."""
    return format_iso(parse_iso(value, tz))


def parse_calendar_date(value: str) -> date:
    """Parse a strict ``dd/MM/yyyy`` string."""
    if not isinstance(value, str) or not _CALENDAR_DATE.fullmatch(value):
        raise DateParseError(
            f"Invalid date {value!r}, expected dd/MM/yyyy",
            value=str(value),
            expected_format="dd/MM/yyyy",
        )
    try:
        return datetime.strptime(value, DATE_INPUT_FORMAT).date()
    except ValueError as exc:
        raise DateParseError(
            f"Invalid date {value!r}, expected dd/MM/yyyy",
            value=value,
            expected_format="dd/MM/yyyy",
        ) from exc


@dataclass(frozen=True)
class RangeBounds:
    """Inclusive ISO-8601 bounds of one calendar range query."""

    from_date: str
    to_date: str
    lower: str
    upper: str


class RangeQueryCodec:
    """Pure, stateless conversions between caller ranges and store queries."""

    def __init__(self, tz: tzinfo | None = None):
        self.tz = tz or DEFAULT_TZ

    def start_of_day(self, value: str) -> datetime:
        return datetime.combine(parse_calendar_date(value), time.min, tzinfo=self.tz)

    def end_of_day(self, value: str) -> datetime:
        return datetime.combine(parse_calendar_date(value), _END_OF_DAY, tzinfo=self.tz)

    def bounds(self, from_date: str, to_date: str) -> RangeBounds:
        """Build inclusive bounds ``[from_date 00:00:00, to_date 23:59:59.999]``.

        Raises:
            DateParseError: if either date is not ``dd/MM/yyyy``
        """
        lower = format_iso(self.start_of_day(from_date))
        upper = format_iso(self.end_of_day(to_date))
        return RangeBounds(from_date=from_date, to_date=to_date, lower=lower, upper=upper)

    def to_iso(self, moment: datetime) -> str:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=self.tz)
        return format_iso(moment)

    def from_iso(self, value: str) -> datetime:
        """Parse a stored ISO value back into local time."""
        return parse_iso(value, self.tz).astimezone(self.tz)

    def document_id(self, record: QuotationRecord) -> str:
        """Deterministic identifier ``{type}_{yyyyMMdd_HHmmss}`` of a record."""
        return f"{record.type}_{self.from_iso(record.date).strftime(DOCUMENT_KEY_FORMAT)}"


__all__ = [
    "DATE_INPUT_FORMAT",
    "DOCUMENT_KEY_FORMAT",
    "DEFAULT_TZ",
    "RangeBounds",
    "RangeQueryCodec",
    "format_iso",
    "normalize_iso",
    "parse_calendar_date",
    "parse_iso",
]
