"""
Framework wiring test: plugin discovery, flag handling, storage lifecycle.

Runs the whole lifecycle in one test because the framework is initialized once per
Variables instance.
"""
import pytest

from scitrera_app_framework import Variables

from mnemoflow.config import (
    MNEMOFLOW_DATA_DIR, MNEMOFLOW_STORAGE_BACKEND, MNEMOFLOW_SQLITE_STORAGE_PATH,
    MNEMOFLOW_ENABLE_WORKING_MEMORY, MNEMOFLOW_ENABLE_VERSIONING, MNEMOFLOW_ENABLE_GRAPH,
    MNEMOFLOW_ENABLE_HIERARCHY, MNEMOFLOW_ENABLE_IMPORTANCE_SCORING, MNEMOFLOW_EMBEDDING_DIMENSIONS,
)
from mnemoflow.models.memory import RememberInput, MemoryKind
from mnemoflow.services.llm import get_llm_service, LLMNotConfiguredError
from mnemoflow.services.pipeline import get_pipeline_service
from mnemoflow.services.retrieval import get_retrieval_strategy
from mnemoflow.services.retrieval.keyword import KeywordRetrievalStrategy
from mnemoflow.services.storage import get_storage_backend
from mnemoflow.services.storage.sqlite import SQLiteStorageBackend


@pytest.mark.integration
@pytest.mark.asyncio
async def test_plugin_wiring_end_to_end(tmp_path, test_logger):
    from mnemoflow.dependencies import preconfigure, initialize_services, shutdown_services

    v = Variables()
    v.set(MNEMOFLOW_DATA_DIR, str(tmp_path))
    v.set(MNEMOFLOW_STORAGE_BACKEND, "sqlite")
    v.set(MNEMOFLOW_SQLITE_STORAGE_PATH, str(tmp_path / "wiring.db"))
    v.set(MNEMOFLOW_EMBEDDING_DIMENSIONS, 32)
    v.set(MNEMOFLOW_ENABLE_WORKING_MEMORY, "true")
    v.set(MNEMOFLOW_ENABLE_VERSIONING, "true")
    v.set(MNEMOFLOW_ENABLE_GRAPH, "true")
    v.set(MNEMOFLOW_ENABLE_IMPORTANCE_SCORING, "true")
    v.set(MNEMOFLOW_ENABLE_HIERARCHY, "true")  # needs generation; the default noop provider disables it

    v, _ = preconfigure(v=v, test_mode=True, test_logger=test_logger)
    v = await initialize_services(v)
    try:
        storage = get_storage_backend(v)
        assert isinstance(storage, SQLiteStorageBackend)
        assert await storage.health_check()
        assert isinstance(get_retrieval_strategy(v), KeywordRetrievalStrategy)
        assert get_llm_service(v).is_configured is False

        pipeline = get_pipeline_service(v)
        assert set(pipeline.enabled_stages) == {"versioning", "importance", "graph", "working_memory"}

        record = await pipeline.remember(RememberInput(content="Prefers aisle seats", kind=MemoryKind.PREFERENCE))
        assert record.embedding is not None and len(record.embedding) == 32
        assert 0.0 <= (await pipeline.inspect(record.id)).importance <= 1.0
        assert [s.version for s in pipeline.get_history(record.id)] == [1]
        assert [r.id for r in pipeline.get_context()] == [record.id]

        assert [r.id for r in await pipeline.recall("aisle")] == [record.id]
        assert await pipeline.recall("window") == []

        with pytest.raises(LLMNotConfiguredError):
            await pipeline.summarize()

        assert await pipeline.forget(record.id) is True
        assert await pipeline.recall("aisle") == []
    finally:
        await shutdown_services(v)

    assert await storage.health_check() is False
