"""Consolidation Service - folds recent activity into summary records."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...models.memory import MemoryRecord, MemoryKind, META_CONSOLIDATED_FROM
from .._constants import EXT_CONSOLIDATION_SERVICE, EXT_MEMORY_SERVICE, EXT_LLM_SERVICE

MNEMOFLOW_CONSOLIDATION_SERVICE = 'MNEMOFLOW_CONSOLIDATION_SERVICE'
DEFAULT_MNEMOFLOW_CONSOLIDATION_SERVICE = 'temporal'

MNEMOFLOW_CONSOLIDATION_MIN_MEMORIES = 'MNEMOFLOW_CONSOLIDATION_MIN_MEMORIES'
DEFAULT_MNEMOFLOW_CONSOLIDATION_MIN_MEMORIES = 10
MNEMOFLOW_CONSOLIDATION_WINDOW_HOURS = 'MNEMOFLOW_CONSOLIDATION_WINDOW_HOURS'
DEFAULT_MNEMOFLOW_CONSOLIDATION_WINDOW_HOURS = 24.0
MNEMOFLOW_CONSOLIDATION_RETIRE_SOURCES = 'MNEMOFLOW_CONSOLIDATION_RETIRE_SOURCES'
DEFAULT_MNEMOFLOW_CONSOLIDATION_RETIRE_SOURCES = False

CONSOLIDATION_SOURCE = 'consolidation'


@dataclass
class ConsolidationSettings:
    """Configuration for temporal consolidation."""
    min_memories: int = DEFAULT_MNEMOFLOW_CONSOLIDATION_MIN_MEMORIES  # Trigger threshold within the window
    time_window: timedelta = timedelta(hours=DEFAULT_MNEMOFLOW_CONSOLIDATION_WINDOW_HOURS)
    retire_sources: bool = DEFAULT_MNEMOFLOW_CONSOLIDATION_RETIRE_SOURCES  # Delete originals after summarizing


def is_consolidation_summary(record: MemoryRecord) -> bool:
    return record.kind == MemoryKind.SUMMARY and bool((record.metadata or {}).get(META_CONSOLIDATED_FROM))


def consolidated_ids(records: list[MemoryRecord]) -> set[str]:
    """Ids already folded into some consolidation summary in ``records``."""
    folded = set()
    for record in records:
        if is_consolidation_summary(record):
            folded.update(record.metadata[META_CONSOLIDATED_FROM])
    return folded


class ConsolidationService(ABC):
    """Interface for consolidation."""

    @abstractmethod
    def eligible(self, records: list[MemoryRecord]) -> list[MemoryRecord]:
        """Records not yet folded into a summary, excluding consolidation summaries themselves."""
        pass

    @abstractmethod
    def should_consolidate(self, records: list[MemoryRecord], now: datetime) -> bool:
        pass

    @abstractmethod
    async def consolidate(
            self,
            records: list[MemoryRecord],
            forget: Optional[Callable[[str], Awaitable[bool]]] = None,
    ) -> Optional[MemoryRecord]:
        """Persist one summary of the eligible records. None when nothing is eligible.

        Sources retired after summarizing are removed through ``forget`` when given.
        """
        pass


# noinspection PyAbstractClass
class ConsolidationServicePluginBase(Plugin):
    """Base plugin for consolidation service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_CONSOLIDATION_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_CONSOLIDATION_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_CONSOLIDATION_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_CONSOLIDATION_SERVICE, DEFAULT_MNEMOFLOW_CONSOLIDATION_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_MEMORY_SERVICE, EXT_LLM_SERVICE)
