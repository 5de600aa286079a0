"""Versioning Service - per-record content history."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from .._constants import EXT_VERSIONING_SERVICE

MNEMOFLOW_VERSIONING_SERVICE = 'MNEMOFLOW_VERSIONING_SERVICE'
DEFAULT_MNEMOFLOW_VERSIONING_SERVICE = 'default'

INITIAL_VERSION_REASON = 'initial'


@dataclass(frozen=True)
class VersionSnapshot:
    """Content of a record at one version. Versions start at 1 and are contiguous."""
    version: int
    content: str
    timestamp: datetime
    reason: str


class VersioningService(ABC):
    """Interface for record version history."""

    @abstractmethod
    def record_version(self, record_id: str, content: str, reason: str = INITIAL_VERSION_REASON) -> VersionSnapshot:
        """Append a snapshot with the next version number."""
        pass

    @abstractmethod
    def get_history(self, record_id: str) -> list[VersionSnapshot]:
        pass

    @abstractmethod
    def get_at_time(self, record_id: str, timestamp: datetime) -> Optional[VersionSnapshot]:
        """Latest snapshot taken at or before ``timestamp``."""
        pass

    @abstractmethod
    def rollback(self, record_id: str, to_version: int) -> Optional[VersionSnapshot]:
        """Truncate history after ``to_version``. Returns that snapshot, or None if out of range."""
        pass

    @abstractmethod
    def remove(self, record_id: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


# noinspection PyAbstractClass
class VersioningServicePluginBase(Plugin):
    """Base plugin for versioning service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_VERSIONING_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_VERSIONING_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_VERSIONING_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_VERSIONING_SERVICE, DEFAULT_MNEMOFLOW_VERSIONING_SERVICE)
