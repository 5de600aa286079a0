"""Dual Memory - episodic log plus a semantic fact table derived from it."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...models.memory import MemoryRecord
from .._constants import EXT_DUAL_MEMORY_SERVICE, EXT_LLM_SERVICE

MNEMOFLOW_DUAL_MEMORY_SERVICE = 'MNEMOFLOW_DUAL_MEMORY_SERVICE'
DEFAULT_MNEMOFLOW_DUAL_MEMORY_SERVICE = 'default'

# Weight of a repeated observation when blending into an existing fact
REINFORCEMENT_WEIGHT = 0.1
DEFAULT_FACT_CONFIDENCE = 0.5


@dataclass
class SemanticFact:
    """A general fact distilled from one or more episodes."""
    fact: str
    confidence: float
    sources: list[str]
    last_updated: datetime


@dataclass
class DualRecall:
    semantic: list[SemanticFact] = field(default_factory=list)
    episodic: list[MemoryRecord] = field(default_factory=list)


class DualMemoryService(ABC):
    """Interface for episodic/semantic memory."""

    @abstractmethod
    async def add_episode(self, record: MemoryRecord) -> list[SemanticFact]:
        """Log an event record and fold facts derived from it. Returns the touched facts."""
        pass

    @abstractmethod
    def recall(self, query: str, include_episodic: bool = True) -> DualRecall:
        pass

    @property
    @abstractmethod
    def facts(self) -> list[SemanticFact]:
        pass

    @abstractmethod
    def remove_episode(self, record_id: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


# noinspection PyAbstractClass
class DualMemoryServicePluginBase(Plugin):
    """Base plugin for dual memory service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_DUAL_MEMORY_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_DUAL_MEMORY_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_DUAL_MEMORY_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_DUAL_MEMORY_SERVICE, DEFAULT_MNEMOFLOW_DUAL_MEMORY_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_LLM_SERVICE,)
