"""Default analytics over a record snapshot."""
from collections import Counter
from datetime import datetime
from logging import Logger

from scitrera_app_framework import Variables, get_logger

from ...models.memory import MemoryRecord, MemoryKind
from ...utils import age_in_days
from .base import AnalyticsService, AnalyticsServicePluginBase, MemoryAnalytics

TOP_CATEGORY_COUNT = 10

HIGH_GROWTH_PER_DAY = 10
OLD_AVERAGE_AGE_DAYS = 90
LARGE_STORAGE_BYTES = 1_000_000
LOW_PREFERENCE_RATIO = 0.1


class DefaultAnalyticsService(AnalyticsService):
    def __init__(self, v: Variables = None):
        self.logger = get_logger(v, name=self.__class__.__name__)

    def generate_analytics(self, records: list[MemoryRecord], now: datetime) -> MemoryAnalytics:
        if not records:
            return MemoryAnalytics()

        ages = [age_in_days(r.created_at, now) for r in records]
        categories = Counter(cat for r in records for cat in r.categories)

        return MemoryAnalytics(
            total_memories=len(records),
            by_kind=dict(Counter(r.kind.value for r in records)),
            average_age_days=sum(ages) / len(ages),
            most_recent_activity=max(r.created_at for r in records),
            storage_size=sum(len(r.model_dump_json(exclude={"relevance"}).encode()) for r in records),
            top_categories=categories.most_common(TOP_CATEGORY_COUNT),
            growth_rate=len(records) / max(1.0, max(ages)),
        )

    def generate_insights(self, analytics: MemoryAnalytics) -> list[str]:
        insights = []
        if analytics.growth_rate > HIGH_GROWTH_PER_DAY:
            insights.append(
                f"High memory growth: {analytics.growth_rate:.1f} memories/day. Consider enabling consolidation."
            )
        if analytics.average_age_days > OLD_AVERAGE_AGE_DAYS:
            insights.append(
                f"Old memories detected (avg {analytics.average_age_days:.0f} days). "
                "Consider archiving or compression."
            )
        if analytics.storage_size > LARGE_STORAGE_BYTES:
            insights.append(
                f"Storage size: {analytics.storage_size / 1024 / 1024:.1f}MB. Consider optimization."
            )
        if analytics.total_memories:
            preference_ratio = analytics.by_kind.get(MemoryKind.PREFERENCE.value, 0) / analytics.total_memories
            if preference_ratio < LOW_PREFERENCE_RATIO:
                insights.append(
                    "Few preference memories detected. Consider tracking user preferences more explicitly."
                )
        return insights


class DefaultAnalyticsServicePlugin(AnalyticsServicePluginBase):
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> DefaultAnalyticsService:
        return DefaultAnalyticsService(v=v)
