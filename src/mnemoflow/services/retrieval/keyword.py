"""Keyword-overlap ranking."""
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables

from ...config import RetrievalStrategyType
from ...models.memory import MemoryRecord
from ...utils import tokenize, searchable_text, keyword_score
from .base import RetrievalStrategy, RetrievalStrategyPluginBase


class KeywordRetrievalStrategy(RetrievalStrategy):
    """
    Scores each candidate by how many query tokens occur in its text.

    The query is split on non-word characters, lower-cased, and tokens of two characters
    or fewer are dropped. Each token is matched as a substring of the lower-cased content
    plus serialized metadata, so "script" hits "JavaScript". Zero-score candidates are
    filtered out.
    """

    async def retrieve(
            self,
            query: str,
            candidates: list[MemoryRecord],
            limit: Optional[int] = None,
    ) -> list[MemoryRecord]:
        query_tokens = tokenize(query)
        if not query_tokens:
            return []

        scored = []
        for record in candidates:
            score = keyword_score(query_tokens, searchable_text(record.content, record.metadata))
            if score > 0:
                scored.append((record, float(score)))

        self.logger.debug("Keyword match: %s of %s candidates for tokens=%s", len(scored), len(candidates), query_tokens)
        return self._rank(scored, limit)


class KeywordRetrievalStrategyPlugin(RetrievalStrategyPluginBase):
    PROVIDER_NAME = RetrievalStrategyType.KEYWORD

    def initialize(self, v: Variables, logger: Logger) -> KeywordRetrievalStrategy:
        return KeywordRetrievalStrategy(v=v)
