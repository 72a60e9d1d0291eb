"""Gold price history reconciliation.

One invocation walks an explicit state machine::

    IDLE -> READING -> VALIDATING -> SERVING_CACHED
                                  -> REFILLING -> SERVING_FRESH (empty data)
                                               -> WRITING -> SERVING_FRESH
                                               -> FAILED

A trustworthy cached series is served without any remote call. An empty or
suspect one is discarded (never deleted) and refilled from the provider; the
fresh series is published before the batch write starts, and a failed write
does not retract it. ``sync`` never raises.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from goldsync.core.config import GoldSyncConfig, get_default_config
from goldsync.core.data.cache import CacheReader, CacheWriter
from goldsync.core.data.codec import RangeBounds, RangeQueryCodec
from goldsync.core.data.storage import DocumentStore, DuckDBDocumentStore
from goldsync.core.exceptions import CacheError, ProviderError
from goldsync.core.logging import log_context, logger
from goldsync.core.models import QuotationRecord, ResultSource, SyncOutcome, SyncState, WriteOutcome
from goldsync.core.providers import SJCHistoryProvider
from goldsync.core.services.integrity import IntegrityValidator

PublishCallback = Callable[[tuple[QuotationRecord, ...], ResultSource], None]
TransitionCallback = Callable[[SyncState], None]


def _call_observer(callback: Callable[..., None] | None, *args: object) -> None:
    # Observer errors never change the outcome of an invocation.
    if callback is None:
        return
    try:
        callback(*args)
    except Exception as exc:
        logger.opt(exception=exc).warning(f"History sync observer failed: {exc}")


class Refiller(Protocol):
    """Anything able to fetch a raw series for a ``dd/MM/yyyy`` range."""

    name: str

    async def fetch(self, from_date: str, to_date: str) -> list[QuotationRecord]: ...


@dataclass
class _Invocation:
    from_date: str
    to_date: str
    on_publish: PublishCallback | None = None
    on_transition: TransitionCallback | None = None
    bounds: RangeBounds | None = None
    cached: list[QuotationRecord] = field(default_factory=list)
    fresh: list[QuotationRecord] = field(default_factory=list)
    records: tuple[QuotationRecord, ...] | None = None
    source: ResultSource | None = None
    write: WriteOutcome = field(default_factory=WriteOutcome)
    error: str | None = None
    trail: list[SyncState] = field(default_factory=list)


class HistorySyncService:
    """Read-validate-refill-write controller for the quotation cache."""

    def __init__(
        self,
        reader: CacheReader,
        refiller: Refiller,
        writer: CacheWriter,
        validator: IntegrityValidator | None = None,
        codec: RangeQueryCodec | None = None,
        store: DocumentStore | None = None,
    ):
        self.reader = reader
        self.refiller = refiller
        self.writer = writer
        self.validator = validator or IntegrityValidator()
        self.codec = codec or RangeQueryCodec()
        self._store = store
        self._in_flight = 0
        self._handlers: dict[SyncState, Callable[[_Invocation], Awaitable[SyncState]]] = {
            SyncState.READING: self._read,
            SyncState.VALIDATING: self._validate,
            SyncState.REFILLING: self._refill,
            SyncState.WRITING: self._write,
        }

    @classmethod
    def from_config(cls, config: GoldSyncConfig | None = None) -> HistorySyncService:
        """Wire a DuckDB store and the SJC provider from ``config``."""
        config = config or get_default_config()
        codec = RangeQueryCodec(config.tz())
        store = DuckDBDocumentStore(config.store.db_path, config.store.collection)
        provider = SJCHistoryProvider(
            base_url=config.provider.base_url,
            endpoint=config.provider.endpoint,
            timeout=config.provider.timeout,
            tz=codec.tz,
        )
        return cls(
            reader=CacheReader(store),
            refiller=provider,
            writer=CacheWriter(store, codec, provider_tag=config.provider.provider_tag),
            validator=IntegrityValidator(config.integrity.max_valid_price),
            codec=codec,
            store=store,
        )

    @property
    def busy(self) -> bool:
        """True while at least one invocation is in flight."""
        return self._in_flight > 0

    async def __aenter__(self) -> HistorySyncService:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        close = getattr(self.refiller, "close", None)
        if close is not None:
            await close()
        if self._store is not None:
            self._store.close()

    async def sync(
        self,
        from_date: str,
        to_date: str,
        *,
        on_publish: PublishCallback | None = None,
        on_transition: TransitionCallback | None = None,
    ) -> SyncOutcome:
        """Serve ``[from_date, to_date]`` (``dd/MM/yyyy``) from cache or provider.

        Args:
            from_date: First calendar day, inclusive
            to_date: Last calendar day, inclusive
            on_publish: Called once when a result is published, before any write
            on_transition: Called with every state entered

        Exceptions raised by either callback are logged and ignored.

        Returns:
            The terminal state, the published records (``None`` when the caller's
            result must stay unchanged) and the write outcome.
        """
        run = _Invocation(from_date, to_date, on_publish, on_transition)
        state = SyncState.IDLE
        self._in_flight += 1
        provider_name = getattr(self.refiller, "name", None)
        with log_context(provider=provider_name, from_date=from_date, to_date=to_date):
            try:
                state = self._enter(run, SyncState.READING)
                while not state.is_terminal:
                    state = self._enter(run, await self._handlers[state](run))
            except Exception as exc:
                logger.opt(exception=exc).error(f"History sync error: {exc}")
                run.error = str(exc)
                state = self._enter(run, SyncState.FAILED)
            finally:
                self._in_flight -= 1

        return SyncOutcome(
            from_date=from_date,
            to_date=to_date,
            state=state,
            records=run.records,
            source=run.source,
            write=run.write,
            error=run.error,
            trail=tuple(run.trail),
        )

    def _enter(self, run: _Invocation, state: SyncState) -> SyncState:
        run.trail.append(state)
        _call_observer(run.on_transition, state)
        return state

    def _publish(self, run: _Invocation, records: Sequence[QuotationRecord], source: ResultSource) -> None:
        run.records = tuple(records)
        run.source = source
        _call_observer(run.on_publish, run.records, source)

    async def _read(self, run: _Invocation) -> SyncState:
        run.bounds = self.codec.bounds(run.from_date, run.to_date)
        run.cached = await self.reader.read(run.bounds)
        return SyncState.VALIDATING

    async def _validate(self, run: _Invocation) -> SyncState:
        if not run.cached:
            logger.info("[Cache] Miss. Fetching fresh data from provider")
            return SyncState.REFILLING

        report = self.validator.inspect(run.cached)
        if report.suspect:
            logger.bind(outliers=report.outlier_count, max_price=report.max_price).warning(
                f"[Cache] Detected suspicious data (>{report.threshold:.0f}). Invalidating cache and re-fetching"
            )
            return SyncState.REFILLING

        logger.info(f"[Cache] Hit! Loaded {len(run.cached)} records")
        self._publish(run, run.cached, ResultSource.CACHE)
        return SyncState.SERVING_CACHED

    async def _refill(self, run: _Invocation) -> SyncState:
        try:
            run.fresh = await self.refiller.fetch(run.from_date, run.to_date)
        except ProviderError as exc:
            logger.bind(error_code=exc.error_code, details=exc.details).error(f"History refill failed: {exc.message}")
            run.error = exc.message
            return SyncState.FAILED

        self._publish(run, run.fresh, ResultSource.REMOTE)
        if not run.fresh:
            return SyncState.SERVING_FRESH
        return SyncState.WRITING

    async def _write(self, run: _Invocation) -> SyncState:
        try:
            written = await self.writer.write(run.fresh)
        except CacheError as exc:
            logger.bind(error_code=exc.error_code).error(f"[Sync] Failed to persist refilled series: {exc.message}")
            run.write = WriteOutcome(attempted=True, written=0, error=exc.message)
            return SyncState.SERVING_FRESH

        run.write = WriteOutcome(attempted=True, written=written)
        logger.info(f"[Sync] Saved {written} records to cache")
        return SyncState.SERVING_FRESH
