"""Default dual memory: in-process episode log and fact table."""
from logging import Logger
from typing import Any, Optional

from scitrera_app_framework import Variables, get_logger

from ...models.memory import MemoryRecord
from ...utils import parse_json_payload, contains_ci, TimeProvider, SystemTimeProvider
from .._constants import EXT_LLM_SERVICE
from ..llm import LLMService
from .base import (
    DualMemoryService, DualMemoryServicePluginBase, DualRecall, SemanticFact,
    REINFORCEMENT_WEIGHT, DEFAULT_FACT_CONFIDENCE,
)


def _confidence(item: dict[str, Any]) -> float:
    try:
        value = float(item.get("confidence", DEFAULT_FACT_CONFIDENCE))
    except (TypeError, ValueError):
        value = DEFAULT_FACT_CONFIDENCE
    return max(0.0, min(1.0, value))


class DefaultDualMemoryService(DualMemoryService):
    """
    Keeps event records in an episodic log and derives general facts from each.

    Facts are keyed by their exact text. A repeated fact has its confidence raised by
    a tenth of the new observation's confidence (capped at 1) and the source id appended.
    """

    PROMPT = """From this event, extract general knowledge or patterns:

Event: {content}

What general facts, preferences, or patterns can we learn?
Format as a JSON array of facts with confidence (0-1):
[{{"fact": "...", "confidence": 0.9}}, ...]"""

    def __init__(self, llm_service: LLMService, time_provider: Optional[TimeProvider] = None, v: Variables = None):
        self.llm_service = llm_service
        self.time = time_provider or SystemTimeProvider()
        self._episodes: list[MemoryRecord] = []
        self._facts: dict[str, SemanticFact] = {}
        self.logger = get_logger(v, name=self.__class__.__name__)

    async def add_episode(self, record: MemoryRecord) -> list[SemanticFact]:
        self._episodes.append(record.model_copy(deep=True))

        response = await self.llm_service.generate(self.PROMPT.format(content=record.content))
        items = parse_json_payload(response)
        if not isinstance(items, list):
            raise ValueError(f"Expected a JSON array of facts, got {type(items).__name__}")

        touched = []
        for item in items:
            if not isinstance(item, dict) or not item.get("fact"):
                continue
            touched.append(self._fold(str(item["fact"]), _confidence(item), record.id))
        self.logger.debug("Episode %s yielded %s facts", record.id, len(touched))
        return touched

    def _fold(self, fact: str, confidence: float, source_id: str) -> SemanticFact:
        now = self.time.now()
        existing = self._facts.get(fact)
        if existing is None:
            existing = self._facts[fact] = SemanticFact(
                fact=fact, confidence=confidence, sources=[source_id], last_updated=now,
            )
            return existing

        existing.confidence = min(1.0, existing.confidence + confidence * REINFORCEMENT_WEIGHT)
        existing.sources.append(source_id)
        existing.last_updated = now
        return existing

    def recall(self, query: str, include_episodic: bool = True) -> DualRecall:
        semantic = sorted(
            (f for f in self._facts.values() if contains_ci(f.fact, query)),
            key=lambda f: f.confidence,
            reverse=True,
        )
        episodic = [e for e in self._episodes if contains_ci(e.content, query)] if include_episodic else []
        return DualRecall(semantic=semantic, episodic=episodic)

    @property
    def facts(self) -> list[SemanticFact]:
        return list(self._facts.values())

    @property
    def episodes(self) -> list[MemoryRecord]:
        return list(self._episodes)

    def remove_episode(self, record_id: str) -> None:
        self._episodes = [e for e in self._episodes if e.id != record_id]

    def clear(self) -> None:
        self._episodes.clear()
        self._facts.clear()


class DefaultDualMemoryServicePlugin(DualMemoryServicePluginBase):
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> DefaultDualMemoryService:
        return DefaultDualMemoryService(self.get_extension(EXT_LLM_SERVICE, v), v=v)
