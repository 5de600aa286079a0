"""Model-backed reasoning over memories."""
from logging import Logger
from typing import Any

from scitrera_app_framework import Variables, get_logger

from ...models.memory import MemoryRecord
from ...utils import parse_json_payload
from .._constants import EXT_LLM_SERVICE
from ..llm import LLMService, LLMNotConfiguredError, generation_available
from .base import ReasoningService, ReasoningServicePluginBase, InferenceResult


class DefaultReasoningService(ReasoningService):
    INFER_PROMPT = """Based on these memories, answer the question:

MEMORIES:
{memories}

QUESTION: {question}

Provide:
1. Your answer
2. Confidence (0-1)
3. Memory IDs that support your answer

Format as JSON: {{"answer": "...", "confidence": 0.8, "sources": ["id1", "id2"]}}"""

    GAPS_PROMPT = """Given these memories, what important information is missing?

{memories}

List 3-5 key questions that would fill knowledge gaps.
Return as JSON array: ["question1", "question2", ...]"""

    PATTERNS_PROMPT = """Analyze these memories and identify patterns, habits, or trends:

{memories}

Return insights as JSON array: ["pattern1", "pattern2", ...]"""

    def __init__(self, llm_service: LLMService, v: Variables = None):
        self.llm_service = llm_service
        self.logger = get_logger(v, name=self.__class__.__name__)

    def _require_generation(self) -> None:
        if not generation_available(self.llm_service):
            raise LLMNotConfiguredError("Reasoning requires a configured generation provider")

    async def infer(self, records: list[MemoryRecord], question: str) -> InferenceResult:
        self._require_generation()
        memories = "\n".join(f"[{r.id}] {r.content}" for r in records)
        payload = parse_json_payload(
            await self.llm_service.generate(self.INFER_PROMPT.format(memories=memories, question=question))
        )
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
        return InferenceResult(
            answer=str(payload.get("answer", "")),
            confidence=max(0.0, min(1.0, float(payload.get("confidence", 0.0)))),
            sources=[str(s) for s in payload.get("sources") or []],
        )

    async def find_gaps(self, records: list[MemoryRecord]) -> list[str]:
        return await self._string_list(self.GAPS_PROMPT, records)

    async def detect_patterns(self, records: list[MemoryRecord]) -> list[str]:
        return await self._string_list(self.PATTERNS_PROMPT, records)

    async def _string_list(self, template: str, records: list[MemoryRecord]) -> list[str]:
        self._require_generation()
        memories = "\n".join(r.content for r in records)
        payload: Any = parse_json_payload(await self.llm_service.generate(template.format(memories=memories)))
        if not isinstance(payload, list):
            raise ValueError(f"Expected a JSON array, got {type(payload).__name__}")
        return [str(item) for item in payload]


class DefaultReasoningServicePlugin(ReasoningServicePluginBase):
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> DefaultReasoningService:
        return DefaultReasoningService(self.get_extension(EXT_LLM_SERVICE, v), v=v)
