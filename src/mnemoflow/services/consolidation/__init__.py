from .base import (
    ConsolidationService,
    ConsolidationServicePluginBase,
    ConsolidationSettings,
    consolidated_ids,
    EXT_CONSOLIDATION_SERVICE,
)
from .temporal import TemporalConsolidationService

from scitrera_app_framework import Variables, get_extension


def get_consolidation_service(v: Variables = None) -> ConsolidationService:
    return get_extension(EXT_CONSOLIDATION_SERVICE, v)


__all__ = (
    'ConsolidationService',
    'ConsolidationServicePluginBase',
    'ConsolidationSettings',
    'TemporalConsolidationService',
    'consolidated_ids',
    'get_consolidation_service',
    'EXT_CONSOLIDATION_SERVICE',
)
