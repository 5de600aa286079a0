"""Analytics Service - corpus statistics and usage insights."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...models.memory import MemoryRecord
from .._constants import EXT_ANALYTICS_SERVICE

MNEMOFLOW_ANALYTICS_SERVICE = 'MNEMOFLOW_ANALYTICS_SERVICE'
DEFAULT_MNEMOFLOW_ANALYTICS_SERVICE = 'default'


@dataclass
class MemoryAnalytics:
    """Snapshot statistics over a set of records."""
    total_memories: int = 0
    by_kind: dict[str, int] = field(default_factory=dict)
    average_age_days: float = 0.0
    most_recent_activity: Optional[datetime] = None
    storage_size: int = 0  # Serialized bytes, estimated
    top_categories: list[tuple[str, int]] = field(default_factory=list)
    growth_rate: float = 0.0  # Records per day since the oldest record


class AnalyticsService(ABC):
    @abstractmethod
    def generate_analytics(self, records: list[MemoryRecord], now: datetime) -> MemoryAnalytics:
        pass

    @abstractmethod
    def generate_insights(self, analytics: MemoryAnalytics) -> list[str]:
        pass


# noinspection PyAbstractClass
class AnalyticsServicePluginBase(Plugin):
    """Base plugin for analytics service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_ANALYTICS_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_ANALYTICS_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_ANALYTICS_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_ANALYTICS_SERVICE, DEFAULT_MNEMOFLOW_ANALYTICS_SERVICE)
