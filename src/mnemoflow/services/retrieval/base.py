"""Retrieval Strategy - ranks a candidate set against a query."""
from abc import ABC, abstractmethod
from typing import Optional

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MNEMOFLOW_RETRIEVAL_STRATEGY, DEFAULT_MNEMOFLOW_RETRIEVAL_STRATEGY
from ...models.memory import MemoryRecord
from .._constants import EXT_RETRIEVAL_STRATEGY

DEFAULT_STRATEGY_LIMIT = 10


class RetrievalStrategy(ABC):
    """Scores and filters candidates for a query.

    Every strategy sorts descending by score (stable, so ties keep candidate order)
    and truncates to ``limit`` (10 when unspecified). Strategies do not touch the
    transient ``relevance`` field of the records they return.
    """

    def __init__(self, v: Variables = None):
        self.logger = get_logger(v, name=self.__class__.__name__)

    @abstractmethod
    async def retrieve(
            self,
            query: str,
            candidates: list[MemoryRecord],
            limit: Optional[int] = None,
    ) -> list[MemoryRecord]:
        """Return the best-matching candidates, best first."""
        pass

    @staticmethod
    def _effective_limit(limit: Optional[int]) -> int:
        return DEFAULT_STRATEGY_LIMIT if limit is None else max(0, limit)

    def _rank(self, scored: list[tuple[MemoryRecord, float]], limit: Optional[int]) -> list[MemoryRecord]:
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return [record for record, _ in scored[:self._effective_limit(limit)]]


# noinspection PyAbstractClass
class RetrievalStrategyPluginBase(Plugin):
    """Base plugin for retrieval strategies."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_RETRIEVAL_STRATEGY}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_RETRIEVAL_STRATEGY

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_RETRIEVAL_STRATEGY, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_RETRIEVAL_STRATEGY, DEFAULT_MNEMOFLOW_RETRIEVAL_STRATEGY)
