"""Reconciliation flow states and outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from goldsync.core.models.quotation import QuotationRecord


class SyncState(str, Enum):
    """States of one read-validate-refill-write invocation."""

    IDLE = "idle"
    READING = "reading"
    VALIDATING = "validating"
    SERVING_CACHED = "serving_cached"
    REFILLING = "refilling"
    WRITING = "writing"
    SERVING_FRESH = "serving_fresh"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset({SyncState.SERVING_CACHED, SyncState.SERVING_FRESH, SyncState.FAILED})


class ResultSource(str, Enum):
    """Where a published series came from."""

    CACHE = "cache"
    REMOTE = "remote"


@dataclass(frozen=True)
class WriteOutcome:
    """Result of persisting a refilled series."""

    attempted: bool = False
    written: int = 0
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.attempted and self.error is None


@dataclass(frozen=True)
class SyncOutcome:
    """Result and status of one invocation.

    ``records`` is ``None`` when the caller's current result must be left as-is.
    """

    from_date: str
    to_date: str
    state: SyncState
    records: tuple[QuotationRecord, ...] | None = None
    source: ResultSource | None = None
    write: WriteOutcome = field(default_factory=WriteOutcome)
    error: str | None = None
    trail: tuple[SyncState, ...] = ()

    @property
    def published(self) -> bool:
        return self.records is not None

    @property
    def succeeded(self) -> bool:
        return self.state is not SyncState.FAILED
