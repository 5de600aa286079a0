"""Contradiction Service - Base interface and plugin."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...models.memory import MemoryRecord
from .._constants import EXT_CONTRADICTION_SERVICE, EXT_EMBEDDING_SERVICE, EXT_LLM_SERVICE
from ...utils import generate_id, CONTRADICTION_ID_PREFIX

MNEMOFLOW_CONTRADICTION_SERVICE = 'MNEMOFLOW_CONTRADICTION_SERVICE'
DEFAULT_MNEMOFLOW_CONTRADICTION_SERVICE = 'default'

# Minimum cosine similarity (exclusive) before a pair is judged by the model
MNEMOFLOW_CONTRADICTION_SIMILARITY_THRESHOLD = 'MNEMOFLOW_CONTRADICTION_SIMILARITY_THRESHOLD'
DEFAULT_MNEMOFLOW_CONTRADICTION_SIMILARITY_THRESHOLD = 0.7


class ContradictionResolution(str, Enum):
    """Outcome of a contradiction between a new and an existing record."""
    KEEP_NEW = "keep_new"
    KEEP_OLD = "keep_old"
    MERGE = "merge"


@dataclass
class ContradictionRecord:
    """A detected contradiction between a new record and an existing one."""
    id: str = field(default_factory=lambda: generate_id(CONTRADICTION_ID_PREFIX))
    new_id: str = ''
    existing: Optional[MemoryRecord] = None
    similarity: float = 0.0
    detected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resolution: Optional[ContradictionResolution] = None


class ContradictionService(ABC):
    """Interface for contradiction detection and resolution."""

    @abstractmethod
    async def detect(self, record: MemoryRecord, existing: list[MemoryRecord]) -> list[ContradictionRecord]:
        """Existing records the model judges to contradict ``record``, in candidate order.

        Only candidates above the similarity gate are judged.
        """
        pass

    @abstractmethod
    async def resolve(self, record: MemoryRecord, existing: MemoryRecord) -> ContradictionResolution:
        """Decide how a detected contradiction is settled."""
        pass


# noinspection PyAbstractClass
class ContradictionServicePluginBase(Plugin):
    """Base plugin for contradiction service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_CONTRADICTION_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_CONTRADICTION_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_CONTRADICTION_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_CONTRADICTION_SERVICE, DEFAULT_MNEMOFLOW_CONTRADICTION_SERVICE)
        v.set_default_value(MNEMOFLOW_CONTRADICTION_SIMILARITY_THRESHOLD,
                            DEFAULT_MNEMOFLOW_CONTRADICTION_SIMILARITY_THRESHOLD)

    def get_dependencies(self, v: Variables):
        return (EXT_EMBEDDING_SERVICE, EXT_LLM_SERVICE)
