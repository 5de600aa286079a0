"""Pass-through strategy: no scoring, no reordering."""
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables

from ...config import RetrievalStrategyType
from ...models.memory import MemoryRecord
from .base import RetrievalStrategy, RetrievalStrategyPluginBase


class NoneRetrievalStrategy(RetrievalStrategy):
    """Returns candidates in their original order, truncated to limit."""

    async def retrieve(
            self,
            query: str,
            candidates: list[MemoryRecord],
            limit: Optional[int] = None,
    ) -> list[MemoryRecord]:
        return list(candidates[:self._effective_limit(limit)])


class NoneRetrievalStrategyPlugin(RetrievalStrategyPluginBase):
    PROVIDER_NAME = RetrievalStrategyType.NONE

    def initialize(self, v: Variables, logger: Logger) -> NoneRetrievalStrategy:
        return NoneRetrievalStrategy(v=v)
