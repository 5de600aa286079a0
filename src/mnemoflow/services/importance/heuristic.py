"""Rule-based importance scorer."""
import math
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables, get_logger

from ...models.memory import MemoryRecord
from ...utils import age_in_days, TimeProvider, SystemTimeProvider
from .base import ImportanceScorer, ImportanceScorerPluginBase, KIND_WEIGHTS, DEFAULT_KIND_WEIGHT, clamp_unit

RECENCY_TIME_CONSTANT_DAYS = 30.0
LONG_CONTENT_CHARS = 200
LONG_CONTENT_BONUS = 0.1
METADATA_BONUS = 0.1


class HeuristicImportanceScorer(ImportanceScorer):
    """
    kind weight x exp(-age_days / 30), plus 0.1 for content over 200 characters and
    0.1 for non-empty metadata, clamped to [0, 1].
    """

    def __init__(self, time_provider: Optional[TimeProvider] = None, v: Variables = None):
        self.time = time_provider or SystemTimeProvider()
        self.logger = get_logger(v, name=self.__class__.__name__)

    async def score(self, record: MemoryRecord) -> float:
        score = KIND_WEIGHTS.get(record.kind, DEFAULT_KIND_WEIGHT)
        days = max(0.0, age_in_days(record.created_at, self.time.now()))
        score *= math.exp(-days / RECENCY_TIME_CONSTANT_DAYS)

        if len(record.content) > LONG_CONTENT_CHARS:
            score += LONG_CONTENT_BONUS
        if record.metadata:
            score += METADATA_BONUS

        return clamp_unit(score)


class HeuristicImportanceScorerPlugin(ImportanceScorerPluginBase):
    PROVIDER_NAME = 'heuristic'

    def initialize(self, v: Variables, logger: Logger) -> HeuristicImportanceScorer:
        return HeuristicImportanceScorer(v=v)

    def get_dependencies(self, v: Variables):
        return ()
