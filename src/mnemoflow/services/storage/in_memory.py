"""In-memory storage backend."""
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables

from ...models.memory import MemoryRecord
from ...utils import cosine_similarity
from .base import StorageBackend, StoragePluginBase


class MemoryStorageBackend(StorageBackend):
    """Dict-backed storage. Stores and returns deep copies so callers cannot mutate stored state."""

    def __init__(self, v: Variables = None):
        super().__init__(v)
        self._records: dict[str, MemoryRecord] = {}
        self.logger.info("Initialized MemoryStorageBackend")

    async def save(self, record: MemoryRecord) -> None:
        self._records[record.id] = record.for_storage()
        self.logger.debug("Saved record %s (total=%s)", record.id, len(self._records))

    async def get(self, record_id: str) -> Optional[MemoryRecord]:
        record = self._records.get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    async def get_all(self) -> list[MemoryRecord]:
        return [r.model_copy(deep=True) for r in self._records.values()]

    async def delete(self, record_id: str) -> bool:
        return self._records.pop(record_id, None) is not None

    async def clear(self) -> None:
        count = len(self._records)
        self._records.clear()
        self.logger.debug("Cleared %s records", count)

    @property
    def supports_similarity_search(self) -> bool:
        return True

    async def search_similar(
            self,
            query_embedding: list[float],
            limit: int = 10,
    ) -> list[tuple[MemoryRecord, float]]:
        scored = [
            (record, cosine_similarity(query_embedding, record.embedding))
            for record in self._records.values()
            if record.embedding
        ]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return [(record.model_copy(deep=True), score) for record, score in scored[:limit]]


class MemoryStoragePlugin(StoragePluginBase):
    PROVIDER_NAME = 'memory'

    def initialize(self, v: Variables, logger: Logger) -> MemoryStorageBackend:
        return MemoryStorageBackend(v=v)
