"""Ranking delegated to the storage backend's nearest-neighbor search."""
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables

from ...config import RetrievalStrategyType
from ...models.memory import MemoryRecord
from .._constants import EXT_EMBEDDING_SERVICE, EXT_STORAGE_BACKEND
from ..embedding import EmbeddingService
from ..storage import StorageBackend
from .base import RetrievalStrategy, RetrievalStrategyPluginBase


class RemoteIndexRetrievalStrategy(RetrievalStrategy):
    """
    Ignores the supplied candidates and queries the storage index directly.

    Records come back as the backend reconstructed them from its result rows, in the
    backend's distance order.
    """

    def __init__(self, storage: StorageBackend, embedding_service: EmbeddingService, v: Variables = None):
        super().__init__(v)
        if not storage.supports_similarity_search:
            raise ValueError(f"{storage.__class__.__name__} cannot serve remote-index retrieval")
        self.storage = storage
        self.embedding_service = embedding_service

    async def retrieve(
            self,
            query: str,
            candidates: list[MemoryRecord],
            limit: Optional[int] = None,
    ) -> list[MemoryRecord]:
        if not query.strip():
            return []
        limit = self._effective_limit(limit)
        if limit == 0:
            return []
        query_embedding = await self.embedding_service.embed(query)
        rows = await self.storage.search_similar(query_embedding, limit=limit)
        return [record for record, _ in rows[:limit]]


class RemoteIndexRetrievalStrategyPlugin(RetrievalStrategyPluginBase):
    PROVIDER_NAME = RetrievalStrategyType.REMOTE_INDEX

    def initialize(self, v: Variables, logger: Logger) -> RemoteIndexRetrievalStrategy:
        return RemoteIndexRetrievalStrategy(
            storage=self.get_extension(EXT_STORAGE_BACKEND, v),
            embedding_service=self.get_extension(EXT_EMBEDDING_SERVICE, v),
            v=v,
        )

    def get_dependencies(self, v: Variables):
        return (EXT_STORAGE_BACKEND, EXT_EMBEDDING_SERVICE)
