from .base import DualMemoryService, DualMemoryServicePluginBase, DualRecall, SemanticFact, EXT_DUAL_MEMORY_SERVICE
from .default import DefaultDualMemoryService

from scitrera_app_framework import Variables, get_extension


def get_dual_memory_service(v: Variables = None) -> DualMemoryService:
    return get_extension(EXT_DUAL_MEMORY_SERVICE, v)


__all__ = (
    'DualMemoryService',
    'DualMemoryServicePluginBase',
    'DualRecall',
    'SemanticFact',
    'DefaultDualMemoryService',
    'get_dual_memory_service',
    'EXT_DUAL_MEMORY_SERVICE',
)
