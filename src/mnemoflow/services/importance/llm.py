"""Model-judged importance scorer."""
import math
from logging import Logger

from scitrera_app_framework import Variables, get_logger

from ...models.memory import MemoryRecord
from .._constants import EXT_LLM_SERVICE
from ..llm import LLMService
from .base import ImportanceScorer, ImportanceScorerPluginBase, DEFAULT_MODEL_IMPORTANCE, clamp_unit


def parse_importance(text: str) -> float:
    """Leading number of the response, clamped to [0, 1]; 0.5 when there is none."""
    tokens = text.strip().split()
    if not tokens:
        return DEFAULT_MODEL_IMPORTANCE
    try:
        value = float(tokens[0].rstrip(".,;:"))
    except ValueError:
        return DEFAULT_MODEL_IMPORTANCE
    if math.isnan(value):
        return DEFAULT_MODEL_IMPORTANCE
    return clamp_unit(value)


class LLMImportanceScorer(ImportanceScorer):
    """Asks the generation port for a 0-1 importance rating."""

    requires_generation = True

    PROMPT = """Rate the importance of this memory on a scale of 0-1:

Memory: {content}
Type: {kind}

Consider:
- Uniqueness (unique events > routine events)
- Emotional significance
- Long-term relevance
- Actionability

Return ONLY a number between 0 and 1."""

    def __init__(self, llm_service: LLMService, v: Variables = None):
        self.llm_service = llm_service
        self.logger = get_logger(v, name=self.__class__.__name__)

    async def score(self, record: MemoryRecord) -> float:
        response = await self.llm_service.generate(
            self.PROMPT.format(content=record.content, kind=record.kind.value)
        )
        score = parse_importance(response)
        self.logger.debug("Model importance for %s: %s (raw=%r)", record.id, score, response[:40])
        return score


class LLMImportanceScorerPlugin(ImportanceScorerPluginBase):
    PROVIDER_NAME = 'llm'

    def initialize(self, v: Variables, logger: Logger) -> LLMImportanceScorer:
        return LLMImportanceScorer(self.get_extension(EXT_LLM_SERVICE, v), v=v)
