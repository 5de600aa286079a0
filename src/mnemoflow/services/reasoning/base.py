"""Reasoning Service - conclusions drawn across several records."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...models.memory import MemoryRecord
from .._constants import EXT_REASONING_SERVICE, EXT_LLM_SERVICE

MNEMOFLOW_REASONING_SERVICE = 'MNEMOFLOW_REASONING_SERVICE'
DEFAULT_MNEMOFLOW_REASONING_SERVICE = 'default'


@dataclass
class InferenceResult:
    answer: str
    confidence: float
    sources: list[str] = field(default_factory=list)


class ReasoningService(ABC):
    """Interface for reasoning over memories."""

    @abstractmethod
    async def infer(self, records: list[MemoryRecord], question: str) -> InferenceResult:
        pass

    @abstractmethod
    async def find_gaps(self, records: list[MemoryRecord]) -> list[str]:
        """Questions whose answers would fill knowledge gaps."""
        pass

    @abstractmethod
    async def detect_patterns(self, records: list[MemoryRecord]) -> list[str]:
        pass


# noinspection PyAbstractClass
class ReasoningServicePluginBase(Plugin):
    """Base plugin for reasoning service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_REASONING_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_REASONING_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_REASONING_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_REASONING_SERVICE, DEFAULT_MNEMOFLOW_REASONING_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_LLM_SERVICE,)
