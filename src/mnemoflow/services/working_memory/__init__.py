from .base import WorkingMemory, WorkingMemoryPluginBase, EXT_WORKING_MEMORY
from .lru import LRUWorkingMemory

from scitrera_app_framework import Variables, get_extension


def get_working_memory(v: Variables = None) -> WorkingMemory:
    return get_extension(EXT_WORKING_MEMORY, v)


__all__ = (
    'WorkingMemory',
    'WorkingMemoryPluginBase',
    'LRUWorkingMemory',
    'get_working_memory',
    'EXT_WORKING_MEMORY',
)
