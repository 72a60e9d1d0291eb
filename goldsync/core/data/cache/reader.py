"""Cache reader: range queries against the document store."""

from __future__ import annotations

from pydantic import ValidationError

from goldsync.core.data.codec import RangeBounds
from goldsync.core.data.storage import DocumentStore
from goldsync.core.exceptions import DataValidationError
from goldsync.core.models import QuotationRecord


class CacheReader:
    """Reads the cached quotation series for a range, oldest first."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def read(self, bounds: RangeBounds) -> list[QuotationRecord]:
        """Return the records within ``bounds``; an empty list when none are cached.

        Store failures propagate as :class:`CacheError`. A stored document that
        is not a valid quotation raises :class:`DataValidationError`.
        """
        documents = await self.store.query_range(bounds.lower, bounds.upper)
        records = []
        for document in documents:
            try:
                records.append(QuotationRecord.model_validate(document))
            except ValidationError as exc:
                raise DataValidationError(
                    f"Cached document {document.get('id')!r} is not a valid quotation",
                    validation_errors={"errors": exc.errors(include_url=False)},
                    details={"id": document.get("id")},
                ) from exc
        return records
