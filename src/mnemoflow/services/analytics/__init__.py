from .base import AnalyticsService, AnalyticsServicePluginBase, MemoryAnalytics, EXT_ANALYTICS_SERVICE
from .default import DefaultAnalyticsService

from scitrera_app_framework import Variables, get_extension


def get_analytics_service(v: Variables = None) -> AnalyticsService:
    return get_extension(EXT_ANALYTICS_SERVICE, v)


__all__ = (
    'AnalyticsService',
    'AnalyticsServicePluginBase',
    'MemoryAnalytics',
    'DefaultAnalyticsService',
    'get_analytics_service',
    'EXT_ANALYTICS_SERVICE',
)
