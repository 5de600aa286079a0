"""Abstract storage backend interface."""
from abc import ABC, abstractmethod
from logging import Logger
from typing import Optional

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables, Plugin, enabled_option_pattern

from ...config import MNEMOFLOW_STORAGE_BACKEND, DEFAULT_MNEMOFLOW_STORAGE_BACKEND
from ...models.memory import MemoryRecord

from .._constants import EXT_STORAGE_BACKEND


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    Records are keyed by id; saving an existing id replaces it. Backends never persist
    the transient ``relevance`` field.
    """

    def __init__(self, v: Variables = None):
        self.logger = get_logger(v, name=self.__class__.__name__)

    # Lifecycle
    async def connect(self) -> None:
        """Initialize storage connection."""
        return

    async def disconnect(self) -> None:
        """Close storage connection."""
        return

    async def health_check(self) -> bool:
        """Check if storage is healthy."""
        return True

    # Record operations
    @abstractmethod
    async def save(self, record: MemoryRecord) -> None:
        """Insert or replace a record."""
        pass

    @abstractmethod
    async def get(self, record_id: str) -> Optional[MemoryRecord]:
        """Get record by id, or None."""
        pass

    @abstractmethod
    async def get_all(self) -> list[MemoryRecord]:
        """All stored records."""
        pass

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """Delete record by id. Returns True if a record was removed."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove every record."""
        pass

    # Optional similarity search capability
    @property
    def supports_similarity_search(self) -> bool:
        return False

    async def search_similar(
            self,
            query_embedding: list[float],
            limit: int = 10,
    ) -> list[tuple[MemoryRecord, float]]:
        """Records nearest to the query embedding, best first, with their similarity scores."""
        raise NotImplementedError(f"{self.__class__.__name__} does not support similarity search")


# noinspection PyAbstractClass
class StoragePluginBase(Plugin):
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_STORAGE_BACKEND}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_STORAGE_BACKEND

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_STORAGE_BACKEND, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_STORAGE_BACKEND, DEFAULT_MNEMOFLOW_STORAGE_BACKEND)

    async def async_ready(self, v: Variables, logger: Logger, value: object | None) -> None:
        if isinstance(value, StorageBackend):
            try:
                await value.connect()
                logger.info("Storage backend '%s' connected successfully.", self.PROVIDER_NAME)
            except Exception as e:
                logger.error("Error connecting storage backend '%s': %s", self.PROVIDER_NAME, e)
                raise
        return

    async def async_stopping(self, v: Variables, logger: Logger, value: object | None) -> None:
        if isinstance(value, StorageBackend):
            try:
                await value.disconnect()
                logger.info("Storage backend '%s' disconnected successfully.", self.PROVIDER_NAME)
            except Exception as e:
                logger.error("Error disconnecting storage backend '%s': %s", self.PROVIDER_NAME, e)
        return
