"""Importance Scoring - assigns metadata.importance in [0, 1]."""
from abc import ABC, abstractmethod

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...models.memory import MemoryRecord, MemoryKind
from .._constants import EXT_IMPORTANCE_SCORER, EXT_LLM_SERVICE

MNEMOFLOW_IMPORTANCE_SCORER = 'MNEMOFLOW_IMPORTANCE_SCORER'
DEFAULT_MNEMOFLOW_IMPORTANCE_SCORER = 'heuristic'

# Base weight per memory kind
KIND_WEIGHTS: dict[MemoryKind, float] = {
    MemoryKind.PREFERENCE: 0.8,
    MemoryKind.FACT: 0.6,
    MemoryKind.EVENT: 0.5,
    MemoryKind.SUMMARY: 0.9,
    MemoryKind.TODO: 0.7,
}
DEFAULT_KIND_WEIGHT = 0.5

# Used when model output is not a number
DEFAULT_MODEL_IMPORTANCE = 0.5


def clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


class ImportanceScorer(ABC):
    """Interface for importance scorers."""

    # Whether scoring calls the generation port
    requires_generation: bool = False

    @abstractmethod
    async def score(self, record: MemoryRecord) -> float:
        """Importance in [0, 1]."""
        pass


# noinspection PyAbstractClass
class ImportanceScorerPluginBase(Plugin):
    """Base plugin for importance scorers."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_IMPORTANCE_SCORER}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_IMPORTANCE_SCORER

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_IMPORTANCE_SCORER, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_IMPORTANCE_SCORER, DEFAULT_MNEMOFLOW_IMPORTANCE_SCORER)

    def get_dependencies(self, v: Variables):
        return (EXT_LLM_SERVICE,)
