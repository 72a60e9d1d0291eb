"""Cache writer: idempotent batch persistence of refilled series."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from goldsync.core.data.codec import RangeQueryCodec, format_iso
from goldsync.core.data.storage import DocumentStore
from goldsync.core.models import QuotationRecord, StoredQuotation

DEFAULT_PROVIDER_TAG = "SJC"


class CacheWriter:
    """Upserts a series under deterministic ``{type}_{yyyyMMdd_HHmmss}`` identifiers.

    Re-writing the same logical record overwrites its document, so repeated or
    concurrent refills of one range converge on the same stored state.
    """

    def __init__(
        self,
        store: DocumentStore,
        codec: RangeQueryCodec,
        provider_tag: str = DEFAULT_PROVIDER_TAG,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.codec = codec
        self.provider_tag = provider_tag
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def build_documents(self, series: Sequence[QuotationRecord]) -> dict[str, dict[str, object]]:
        """Stage one document per identifier; a later record with the same id wins."""
        synced_at = format_iso(self._clock())
        documents: dict[str, dict[str, object]] = {}
        for record in series:
            stored = StoredQuotation(
                date=record.date,
                type=record.type,
                buy=record.buy,
                sell=record.sell,
                provider=self.provider_tag,
                synced_at=synced_at,
            )
            documents[self.codec.document_id(record)] = stored.to_document()
        return documents

    async def write(self, series: Sequence[QuotationRecord]) -> int:
        """Commit ``series`` as one atomic batch and return the document count.

        Raises:
            CacheError: if the batch could not be committed; nothing is written
        """
        if not series:
            return 0
        return await self.store.commit_batch(self.build_documents(series))
