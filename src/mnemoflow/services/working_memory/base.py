"""Working Memory - bounded, recency-ordered tier in front of storage."""
from abc import ABC, abstractmethod
from typing import Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...models.memory import MemoryRecord
from .._constants import EXT_WORKING_MEMORY, EXT_STORAGE_BACKEND

MNEMOFLOW_WORKING_MEMORY = 'MNEMOFLOW_WORKING_MEMORY'
DEFAULT_MNEMOFLOW_WORKING_MEMORY = 'lru'

MNEMOFLOW_WORKING_MEMORY_CAPACITY = 'MNEMOFLOW_WORKING_MEMORY_CAPACITY'
DEFAULT_MNEMOFLOW_WORKING_MEMORY_CAPACITY = 10


class WorkingMemory(ABC):
    """Interface for the working cache.

    Size never exceeds ``capacity``. Evicted records are written back to storage with a
    ``last_accessed`` timestamp rather than dropped.
    """

    @abstractmethod
    async def activate(self, record: MemoryRecord) -> list[MemoryRecord]:
        """Move a record to the front. Returns records evicted by this activation."""
        pass

    @abstractmethod
    async def recall(self, query: str) -> list[MemoryRecord]:
        """Case-insensitive substring match against cached records, falling back to a storage scan."""
        pass

    @abstractmethod
    def get_context(self) -> list[MemoryRecord]:
        """Cached records, most recently activated first."""
        pass

    @abstractmethod
    def remove(self, record_id: str) -> Optional[MemoryRecord]:
        """Drop a record from the cache without write-back."""
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @property
    @abstractmethod
    def capacity(self) -> int:
        pass

    @property
    @abstractmethod
    def size(self) -> int:
        pass


# noinspection PyAbstractClass
class WorkingMemoryPluginBase(Plugin):
    """Base plugin for working memory."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_WORKING_MEMORY}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_WORKING_MEMORY

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_WORKING_MEMORY, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_WORKING_MEMORY, DEFAULT_MNEMOFLOW_WORKING_MEMORY)
        v.set_default_value(MNEMOFLOW_WORKING_MEMORY_CAPACITY, DEFAULT_MNEMOFLOW_WORKING_MEMORY_CAPACITY)

    def get_dependencies(self, v: Variables):
        return (EXT_STORAGE_BACKEND,)
