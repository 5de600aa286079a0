"""Core memory service package."""
from .base import MemoryServicePluginBase, NOTHING_TO_SUMMARIZE, EXT_MEMORY_SERVICE
from .default import MemoryService

from scitrera_app_framework import Variables, get_extension


def get_memory_service(v: Variables = None) -> MemoryService:
    """Get the core memory service instance."""
    return get_extension(EXT_MEMORY_SERVICE, v)


__all__ = (
    'MemoryService',
    'MemoryServicePluginBase',
    'NOTHING_TO_SUMMARIZE',
    'get_memory_service',
    'EXT_MEMORY_SERVICE',
)
