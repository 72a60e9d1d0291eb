"""Observable history state for presentation layers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from goldsync.core.logging import logger
from goldsync.core.models import QuotationRecord, ResultSource, SyncOutcome, SyncState
from goldsync.core.services.history import HistorySyncService


@dataclass(frozen=True)
class FeedSnapshot:
    """What a presentation layer renders at one point in time."""

    loading: bool
    history_data: tuple[QuotationRecord, ...]
    state: SyncState


FeedListener = Callable[[FeedSnapshot], None]


class HistoryFeed:
    """Holds the loading flag and the last published series for one consumer.

    ``history_data`` only changes when the service publishes; a failed
    invocation leaves whatever was displayed before.
    """

    def __init__(self, service: HistorySyncService):
        self.service = service
        self._history_data: tuple[QuotationRecord, ...] = ()
        self._state = SyncState.IDLE
        self._in_flight = 0
        self._listeners: list[FeedListener] = []

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def history_data(self) -> tuple[QuotationRecord, ...]:
        return self._history_data

    @property
    def state(self) -> SyncState:
        return self._state

    def snapshot(self) -> FeedSnapshot:
        return FeedSnapshot(loading=self.loading, history_data=self._history_data, state=self._state)

    def subscribe(self, listener: FeedListener) -> Callable[[], None]:
        """Register ``listener`` for every change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as exc:
                logger.opt(exception=exc).warning(f"History feed listener failed: {exc}")

    def _on_publish(self, records: tuple[QuotationRecord, ...], source: ResultSource) -> None:
        self._history_data = records
        self._notify()

    def _on_transition(self, state: SyncState) -> None:
        self._state = state
        self._notify()

    async def fetch_and_sync_history(self, from_date: str, to_date: str) -> SyncOutcome:
        """Run one invocation for ``dd/MM/yyyy`` bounds, keeping ``loading`` accurate."""
        self._in_flight += 1
        try:
            self._notify()
            return await self.service.sync(
                from_date,
                to_date,
                on_publish=self._on_publish,
                on_transition=self._on_transition,
            )
        finally:
            self._in_flight -= 1
            self._notify()
