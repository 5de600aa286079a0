"""Working memory backed by cachetools.LRUCache."""
import itertools
from logging import Logger
from typing import Optional

from cachetools import Cache, LRUCache
from scitrera_app_framework import Variables, get_logger

from ...models.memory import MemoryRecord, META_LAST_ACCESSED
from ...utils import contains_ci, TimeProvider, SystemTimeProvider
from ..storage import StorageBackend
from .._constants import EXT_STORAGE_BACKEND
from .base import (
    WorkingMemory, WorkingMemoryPluginBase,
    MNEMOFLOW_WORKING_MEMORY_CAPACITY, DEFAULT_MNEMOFLOW_WORKING_MEMORY_CAPACITY,
)


class _EvictionTrackingLRU(LRUCache):
    """LRUCache that remembers what it evicted until drained."""

    def __init__(self, maxsize: int):
        super().__init__(maxsize=maxsize)
        self.evicted: list[tuple[int, MemoryRecord]] = []

    def popitem(self):
        key, value = super().popitem()
        self.evicted.append(value)
        return key, value

    def peek(self, key: str):
        # plain Cache lookup leaves LRU order untouched
        return Cache.__getitem__(self, key)

    def drain(self) -> list[tuple[int, MemoryRecord]]:
        evicted, self.evicted = self.evicted, []
        return evicted


class LRUWorkingMemory(WorkingMemory):
    """
    Working cache of capacity K.

    Entries are keyed by record id, so re-activating a cached record moves it to the
    front instead of duplicating it. Reads never change eviction order; only activation does.
    """

    def __init__(
            self,
            storage: StorageBackend,
            capacity: int = DEFAULT_MNEMOFLOW_WORKING_MEMORY_CAPACITY,
            time_provider: Optional[TimeProvider] = None,
            v: Variables = None,
    ):
        if capacity < 1:
            raise ValueError("Working memory capacity must be at least 1")
        self.storage = storage
        self.time = time_provider or SystemTimeProvider()
        self._cache = _EvictionTrackingLRU(maxsize=capacity)
        self._sequence = itertools.count()
        self.logger = get_logger(v, name=self.__class__.__name__)
        self.logger.info("Initialized LRUWorkingMemory with capacity=%s", capacity)

    async def activate(self, record: MemoryRecord) -> list[MemoryRecord]:
        self._cache[record.id] = (next(self._sequence), record.model_copy(deep=True))

        evicted = [rec for _, rec in self._cache.drain()]
        for rec in evicted:
            await self._write_back(rec)
        return evicted

    async def _write_back(self, evicted: MemoryRecord) -> None:
        current = await self.storage.get(evicted.id)
        if current is None:
            self.logger.debug("Evicted record %s no longer in storage, nothing to write back", evicted.id)
            return
        current.set_meta(META_LAST_ACCESSED, self.time.now().isoformat())
        await self.storage.save(current)
        self.logger.debug("Evicted %s from working memory to storage", evicted.id)

    async def recall(self, query: str) -> list[MemoryRecord]:
        hot = [r for r in self.get_context() if contains_ci(r.content, query)]
        if hot:
            return hot
        return [r for r in await self.storage.get_all() if contains_ci(r.content, query)]

    def _entries(self) -> list[tuple[int, MemoryRecord]]:
        return [self._cache.peek(key) for key in list(self._cache)]

    def get_context(self) -> list[MemoryRecord]:
        entries = sorted(self._entries(), key=lambda entry: entry[0], reverse=True)
        return [record.model_copy(deep=True) for _, record in entries]

    def remove(self, record_id: str) -> Optional[MemoryRecord]:
        if record_id not in self._cache:
            return None
        _, record = self._cache.pop(record_id)
        return record

    def clear(self) -> None:
        self._cache.clear()
        self._cache.drain()

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._cache

    @property
    def capacity(self) -> int:
        return int(self._cache.maxsize)

    @property
    def size(self) -> int:
        return len(self._cache)


class LRUWorkingMemoryPlugin(WorkingMemoryPluginBase):
    PROVIDER_NAME = 'lru'

    def initialize(self, v: Variables, logger: Logger) -> LRUWorkingMemory:
        return LRUWorkingMemory(
            storage=self.get_extension(EXT_STORAGE_BACKEND, v),
            capacity=v.environ(
                MNEMOFLOW_WORKING_MEMORY_CAPACITY, default=DEFAULT_MNEMOFLOW_WORKING_MEMORY_CAPACITY, type_fn=int
            ),
            v=v,
        )
