"""Document store interface."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class DocumentStore(ABC):
    """A keyed document collection with range queries and atomic batch upserts."""

    @abstractmethod
    async def query_range(self, lower: str, upper: str) -> list[dict[str, Any]]:
        """Return documents with ``lower <= date <= upper``, ascending by date."""
        pass

    @abstractmethod
    async def commit_batch(self, documents: Mapping[str, Mapping[str, Any]]) -> int:
        """Upsert every document under its identifier, all or nothing."""
        pass

    @abstractmethod
    async def get(self, document_id: str) -> dict[str, Any] | None:
        """Return one document by identifier."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Return the number of stored documents."""
        pass

    def close(self) -> None:
        """Release underlying resources."""
        return None
