"""Embedding-similarity ranking, pure and blended with keyword overlap."""
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables

from ...config import RetrievalStrategyType
from ...models.memory import MemoryRecord
from ...utils import cosine_similarities, tokenize, searchable_text, keyword_score
from .._constants import EXT_EMBEDDING_SERVICE
from ..embedding import EmbeddingService
from .base import RetrievalStrategy, RetrievalStrategyPluginBase

# weight applied to each keyword hit in the hybrid score
HYBRID_KEYWORD_WEIGHT = 0.5


class EmbeddingRetrievalStrategy(RetrievalStrategy):
    """
    Ranks candidates by cosine similarity to the query embedding.

    Candidates without an embedding are excluded, not scored as zero.
    """

    def __init__(self, embedding_service: EmbeddingService, v: Variables = None):
        super().__init__(v)
        self.embedding_service = embedding_service

    async def retrieve(
            self,
            query: str,
            candidates: list[MemoryRecord],
            limit: Optional[int] = None,
    ) -> list[MemoryRecord]:
        embedded = [record for record in candidates if record.embedding]
        if not embedded or not query.strip():
            return []

        query_embedding = await self.embedding_service.embed(query)
        similarities = cosine_similarities(query_embedding, [record.embedding for record in embedded])
        scored = [
            (record, self._score(query, record, similarity))
            for record, similarity in zip(embedded, similarities)
        ]
        self.logger.debug("Scored %s embedded candidates (%s skipped without embedding)",
                          len(embedded), len(candidates) - len(embedded))
        return self._rank(scored, limit)

    def _score(self, query: str, record: MemoryRecord, similarity: float) -> float:
        return similarity


class HybridRetrievalStrategy(EmbeddingRetrievalStrategy):
    """Cosine similarity plus 0.5 per keyword hit; same exclusion rule as the embedding strategy."""

    def __init__(
            self,
            embedding_service: EmbeddingService,
            keyword_weight: float = HYBRID_KEYWORD_WEIGHT,
            v: Variables = None,
    ):
        super().__init__(embedding_service, v=v)
        self.keyword_weight = keyword_weight

    def _score(self, query: str, record: MemoryRecord, similarity: float) -> float:
        hits = keyword_score(tokenize(query), searchable_text(record.content, record.metadata))
        return similarity + self.keyword_weight * hits


class EmbeddingRetrievalStrategyPlugin(RetrievalStrategyPluginBase):
    PROVIDER_NAME = RetrievalStrategyType.EMBEDDING

    def initialize(self, v: Variables, logger: Logger) -> EmbeddingRetrievalStrategy:
        return EmbeddingRetrievalStrategy(self.get_extension(EXT_EMBEDDING_SERVICE, v), v=v)

    def get_dependencies(self, v: Variables):
        return (EXT_EMBEDDING_SERVICE,)


class HybridRetrievalStrategyPlugin(RetrievalStrategyPluginBase):
    PROVIDER_NAME = RetrievalStrategyType.HYBRID

    def initialize(self, v: Variables, logger: Logger) -> HybridRetrievalStrategy:
        return HybridRetrievalStrategy(self.get_extension(EXT_EMBEDDING_SERVICE, v), v=v)

    def get_dependencies(self, v: Variables):
        return (EXT_EMBEDDING_SERVICE,)
