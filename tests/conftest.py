"""
Pytest configuration and fixtures for mnemoflow tests.

Unit tests construct services directly with an isolated Variables instance that does
NOT pull from environment variables. Ports that reach external systems (generation)
are replaced by AsyncMock; embeddings come from the deterministic mock provider.

Usage in tests:
    async def test_something(memory_service):
        record = await memory_service.remember(RememberInput(content="..."))
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest

from scitrera_app_framework import Variables

from mnemoflow.models.memory import MemoryRecord, MemoryKind
from mnemoflow.services.embedding import EmbeddingService, MockEmbeddingProvider
from mnemoflow.services.memory import MemoryService
from mnemoflow.services.retrieval.keyword import KeywordRetrievalStrategy
from mnemoflow.services.storage.in_memory import MemoryStorageBackend
from mnemoflow.utils import TimeProvider, generate_id

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FixedTimeProvider(TimeProvider):
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


def _make_record(
        content: str,
        kind: MemoryKind = MemoryKind.FACT,
        embedding: Optional[list[float]] = None,
        metadata: Optional[dict[str, Any]] = None,
        created_at: datetime = FIXED_NOW,
        record_id: Optional[str] = None,
) -> MemoryRecord:
    return MemoryRecord(
        id=record_id or generate_id("mem"),
        kind=kind,
        content=content,
        embedding=embedding,
        metadata=metadata,
        created_at=created_at,
    )


# -----------------------------------------------------------------------------
# Logging Configuration (initialized by test harness, not framework)
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def test_logger() -> logging.Logger:
    """Root logger for tests; the harness owns logging configuration, not the framework."""
    logger = logging.getLogger("mnemoflow-test")
    logger.setLevel(logging.DEBUG)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s %(funcName)s() > %(message)s',
            datefmt='%Y/%m/%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


# -----------------------------------------------------------------------------
# Service construction
# -----------------------------------------------------------------------------

@pytest.fixture
def v() -> Variables:
    """Isolated Variables instance for direct service construction."""
    return Variables()


@pytest.fixture
def clock() -> FixedTimeProvider:
    return FixedTimeProvider()


@pytest.fixture
def storage(v) -> MemoryStorageBackend:
    return MemoryStorageBackend(v=v)


@pytest.fixture
def embedding_service(v) -> EmbeddingService:
    return EmbeddingService(v=v, provider=MockEmbeddingProvider(v=v, dimensions=64))


@pytest.fixture
def llm_service() -> AsyncMock:
    """Configured generation port; tests set ``generate.return_value`` or ``side_effect``."""
    llm = AsyncMock()
    llm.is_configured = True
    llm.generate = AsyncMock(return_value="")
    return llm


@pytest.fixture
def memory_service(v, storage, embedding_service, llm_service, clock) -> MemoryService:
    return MemoryService(
        storage=storage,
        embedding_service=embedding_service,
        llm_service=llm_service,
        strategy=KeywordRetrievalStrategy(v=v),
        time_provider=clock,
        v=v,
    )


@pytest.fixture
def make_record():
    """Factory for records built without going through a service."""
    return _make_record
