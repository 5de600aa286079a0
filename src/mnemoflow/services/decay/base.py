"""Decay Service - Base interface and plugin."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import DEFAULT_MNEMOFLOW_DECAY_FACTOR
from ...models.memory import MemoryRecord
from .._constants import EXT_DECAY_SERVICE

MNEMOFLOW_DECAY_SERVICE = 'MNEMOFLOW_DECAY_SERVICE'
DEFAULT_MNEMOFLOW_DECAY_SERVICE = 'default'


@dataclass
class DecaySettings:
    """Configuration for recall-time decay."""
    decay_factor: float = DEFAULT_MNEMOFLOW_DECAY_FACTOR  # Per-day multiplier, strictly between 0 and 1

    def __post_init__(self):
        if not 0.0 < self.decay_factor < 1.0:
            raise ValueError(f"decay_factor must be in (0, 1), got {self.decay_factor}")


class DecayService(ABC):
    """Interface for recall-time relevance decay."""

    @abstractmethod
    def relevance(self, record: MemoryRecord, now: datetime) -> float:
        """Decayed relevance of a record at ``now``."""
        pass

    def apply(self, records: list[MemoryRecord], now: datetime) -> list[MemoryRecord]:
        """Copies of ``records`` with ``relevance`` set. Inputs are not mutated."""
        return [record.model_copy(update={"relevance": self.relevance(record, now)}) for record in records]


# noinspection PyAbstractClass
class DecayServicePluginBase(Plugin):
    """Base plugin for decay service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_DECAY_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_DECAY_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_DECAY_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_DECAY_SERVICE, DEFAULT_MNEMOFLOW_DECAY_SERVICE)
