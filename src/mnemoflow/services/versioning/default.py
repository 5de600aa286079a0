"""In-process version history."""
from collections import defaultdict
from datetime import datetime
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables, get_logger

from ...utils import TimeProvider, SystemTimeProvider
from .base import VersioningService, VersioningServicePluginBase, VersionSnapshot, INITIAL_VERSION_REASON


class InMemoryVersioningService(VersioningService):
    def __init__(self, time_provider: Optional[TimeProvider] = None, v: Variables = None):
        self.time = time_provider or SystemTimeProvider()
        self._history: dict[str, list[VersionSnapshot]] = defaultdict(list)
        self.logger = get_logger(v, name=self.__class__.__name__)

    def record_version(self, record_id: str, content: str, reason: str = INITIAL_VERSION_REASON) -> VersionSnapshot:
        history = self._history[record_id]
        snapshot = VersionSnapshot(
            version=len(history) + 1,
            content=content,
            timestamp=self.time.now(),
            reason=reason,
        )
        history.append(snapshot)
        self.logger.debug("Recorded version %s of %s (%s)", snapshot.version, record_id, reason)
        return snapshot

    def get_history(self, record_id: str) -> list[VersionSnapshot]:
        return list(self._history.get(record_id, ()))

    def get_at_time(self, record_id: str, timestamp: datetime) -> Optional[VersionSnapshot]:
        found = None
        for snapshot in self._history.get(record_id, ()):
            if snapshot.timestamp <= timestamp:
                found = snapshot
        return found

    def rollback(self, record_id: str, to_version: int) -> Optional[VersionSnapshot]:
        history = self._history.get(record_id)
        if not history or to_version < 1 or to_version > len(history):
            return None
        del history[to_version:]
        self.logger.info("Rolled back %s to version %s", record_id, to_version)
        return history[-1]

    def remove(self, record_id: str) -> None:
        self._history.pop(record_id, None)

    def clear(self) -> None:
        self._history.clear()


class InMemoryVersioningServicePlugin(VersioningServicePluginBase):
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> InMemoryVersioningService:
        return InMemoryVersioningService(v=v)
