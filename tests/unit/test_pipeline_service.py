"""Tests for the augmentation pipeline: stage order, contradiction outcomes, consolidation, facade operations."""
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from mnemoflow.models.memory import (
    RememberInput, MemoryKind, META_IMPORTANCE, META_CATEGORIES, META_CONTRADICTS, META_RESOLUTION,
    META_CONSOLIDATED_FROM,
)
from mnemoflow.models.relation import RelationKind
from mnemoflow.services.analytics import DefaultAnalyticsService
from mnemoflow.services.consolidation import TemporalConsolidationService, ConsolidationSettings
from mnemoflow.services.contradiction import DefaultContradictionService
from mnemoflow.services.graph import InMemoryRelationGraph
from mnemoflow.services.hierarchy import DefaultHierarchyService
from mnemoflow.services.llm import LLMNotConfiguredError
from mnemoflow.services.pipeline import AugmentedMemoryService
from mnemoflow.services.reasoning import DefaultReasoningService
from mnemoflow.services.versioning import InMemoryVersioningService
from mnemoflow.services.working_memory import LRUWorkingMemory

X_AXIS = [1.0, 0.0]


@pytest.fixture
def graph(v, clock):
    return InMemoryRelationGraph(time_provider=clock, v=v)


@pytest.fixture
def contradiction_service(v, embedding_service, llm_service, clock):
    return DefaultContradictionService(embedding_service, llm_service, time_provider=clock, v=v)


@pytest.fixture
def versioning(v, clock):
    return InMemoryVersioningService(time_provider=clock, v=v)


@pytest.fixture
def stage_log():
    return []


@pytest.fixture
def recording_stages(stage_log):
    """Mock stage components that record the order in which they run."""

    def recorder(name, result=None):
        def record(*args, **kwargs):
            stage_log.append(name)
            return result
        return record

    versioning = MagicMock()
    versioning.record_version = MagicMock(side_effect=recorder("version"))
    importance = MagicMock()
    importance.score = AsyncMock(side_effect=recorder("importance", 0.7))
    contradiction = MagicMock()
    contradiction.detect = AsyncMock(side_effect=recorder("contradiction", []))
    graph = MagicMock()
    graph.add_memory = MagicMock(side_effect=recorder("graph", []))
    hierarchy = MagicMock()
    hierarchy.organize = AsyncMock(side_effect=recorder("hierarchy", ["life/sport"]))
    working_memory = MagicMock()
    working_memory.activate = AsyncMock(side_effect=recorder("activate", []))
    dual = MagicMock()
    dual.add_episode = AsyncMock(side_effect=recorder("episode", []))
    consolidation = MagicMock()
    consolidation.should_consolidate = MagicMock(side_effect=recorder("consolidation", False))

    return dict(
        versioning_service=versioning,
        importance_scorer=importance,
        contradiction_service=contradiction,
        graph=graph,
        hierarchy_service=hierarchy,
        working_memory=working_memory,
        dual_memory_service=dual,
        consolidation_service=consolidation,
    )


class TestStageOrder:
    @pytest.mark.asyncio
    async def test_all_stages_run_in_order(self, v, memory_service, storage, recording_stages, stage_log):
        pipeline = AugmentedMemoryService(memory_service, v=v, **recording_stages)

        record = await pipeline.remember(RememberInput(content="Played tennis", kind=MemoryKind.EVENT))

        assert stage_log == [
            "version", "importance", "contradiction", "graph", "hierarchy", "activate", "episode", "consolidation",
        ]
        stored = await storage.get(record.id)
        assert stored.metadata == {META_IMPORTANCE: 0.7, META_CATEGORIES: ["life/sport"]}

    @pytest.mark.asyncio
    async def test_episodic_stage_only_for_events(self, v, memory_service, recording_stages, stage_log):
        pipeline = AugmentedMemoryService(memory_service, v=v, **recording_stages)
        await pipeline.remember(RememberInput(content="Likes clay courts", kind=MemoryKind.PREFERENCE))
        assert "episode" not in stage_log

    @pytest.mark.asyncio
    async def test_disabled_stages_are_skipped(self, v, memory_service, storage, recording_stages, stage_log):
        partial = {k: recording_stages[k] for k in ("versioning_service", "working_memory")}
        pipeline = AugmentedMemoryService(memory_service, v=v, **partial)

        record = await pipeline.remember(RememberInput(content="Only some stages"))

        assert stage_log == ["version", "activate"]
        assert (await storage.get(record.id)).metadata is None
        assert pipeline.enabled_stages == ["versioning", "working_memory"]

    @pytest.mark.asyncio
    async def test_no_stages_behaves_like_core(self, v, memory_service, storage):
        pipeline = AugmentedMemoryService(memory_service, v=v)
        record = await pipeline.remember(RememberInput(content="plain"))
        assert pipeline.enabled_stages == []
        assert await storage.get(record.id) == record

    @pytest.mark.asyncio
    async def test_corpus_read_once(self, v, memory_service, storage, recording_stages):
        storage.get_all = AsyncMock(wraps=storage.get_all)
        pipeline = AugmentedMemoryService(memory_service, v=v, **recording_stages)
        await pipeline.remember(RememberInput(content="count reads"))
        assert storage.get_all.await_count == 1

    @pytest.mark.asyncio
    async def test_generation_failure_after_persist_keeps_base_record(self, v, memory_service, storage, llm_service):
        hierarchy = DefaultHierarchyService(llm_service, v=v)
        pipeline = AugmentedMemoryService(memory_service, hierarchy_service=hierarchy, v=v)
        llm_service.generate.side_effect = ConnectionError("provider down")

        with pytest.raises(ConnectionError):
            await pipeline.remember(RememberInput(content="half done"))

        records = await storage.get_all()
        assert [r.content for r in records] == ["half done"]
        assert records[0].metadata is None


class TestContradictions:
    @pytest.mark.asyncio
    async def test_keep_old_deletes_new_and_short_circuits(
            self, v, memory_service, storage, llm_service, contradiction_service, versioning, recording_stages
    ):
        old = await memory_service.remember(RememberInput(content="Lives in Paris", embedding=X_AXIS))
        graph = recording_stages["graph"]
        pipeline = AugmentedMemoryService(
            memory_service, contradiction_service=contradiction_service, versioning_service=versioning,
            graph=graph, v=v,
        )
        llm_service.generate.side_effect = ["YES, different cities", "KEEP_OLD"]

        result = await pipeline.remember(RememberInput(content="Lives in Berlin", embedding=X_AXIS))

        assert result == await storage.get(old.id)
        assert [r.id for r in await storage.get_all()] == [old.id]
        graph.add_memory.assert_not_called()

    @pytest.mark.asyncio
    async def test_keep_new_annotates_and_links(
            self, v, memory_service, storage, llm_service, contradiction_service, graph
    ):
        old = await memory_service.remember(RememberInput(content="Prefers tea", embedding=X_AXIS))
        pipeline = AugmentedMemoryService(
            memory_service, contradiction_service=contradiction_service, graph=graph, v=v,
        )
        llm_service.generate.side_effect = ["yes", "KEEP_NEW"]

        new = await pipeline.remember(RememberInput(content="Prefers coffee now", embedding=X_AXIS))

        stored = await storage.get(new.id)
        assert stored.metadata[META_CONTRADICTS] == [old.id]
        assert stored.metadata[META_RESOLUTION] == "keep_new"
        assert await storage.get(old.id) is not None
        kinds = {(r.from_id, r.to_id, r.kind) for r in graph.get_relations(new.id)}
        assert (new.id, old.id, RelationKind.CONTRADICTS) in kinds
        assert (new.id, old.id, RelationKind.RELATES_TO) in kinds

    @pytest.mark.asyncio
    async def test_no_contradiction(self, v, memory_service, storage, llm_service, contradiction_service):
        await memory_service.remember(RememberInput(content="Has a dog", embedding=X_AXIS))
        pipeline = AugmentedMemoryService(memory_service, contradiction_service=contradiction_service, v=v)
        llm_service.generate.return_value = "NO"

        new = await pipeline.remember(RememberInput(content="Walks daily", embedding=X_AXIS))

        assert (await storage.get(new.id)).metadata is None
        assert len(await storage.get_all()) == 2


    @pytest.mark.asyncio
    async def test_candidate_embedding_failure_keeps_record(
            self, v, memory_service, storage, embedding_service, llm_service, contradiction_service, make_record
    ):
        await storage.save(make_record("Lives in Paris"))
        embedding_service.embed_batch = AsyncMock(side_effect=RuntimeError("embedding down"))
        pipeline = AugmentedMemoryService(memory_service, contradiction_service=contradiction_service, v=v)

        new = await pipeline.remember(RememberInput(content="Lives in Berlin", embedding=X_AXIS))

        assert await storage.get(new.id) is not None
        assert len(await storage.get_all()) == 2
        llm_service.generate.assert_not_awaited()


class TestConsolidation:
    @pytest.mark.asyncio
    async def test_summary_appears_once_threshold_reached(self, v, memory_service, storage, llm_service, clock):
        consolidator = TemporalConsolidationService(
            memory_service, llm_service, ConsolidationSettings(min_memories=3, time_window=timedelta(hours=24)), v=v,
        )
        pipeline = AugmentedMemoryService(memory_service, consolidation_service=consolidator, v=v)
        llm_service.generate.return_value = "Weekly recap"

        originals = []
        for i in range(3):
            originals.append(await pipeline.remember(RememberInput(content=f"standup note {i}")))
            clock.advance(minutes=5)

        summaries = [r for r in await storage.get_all() if r.kind == MemoryKind.SUMMARY]
        assert len(summaries) == 1
        assert set(summaries[0].metadata[META_CONSOLIDATED_FROM]) == {r.id for r in originals}
        for original in originals:
            assert await pipeline.inspect(original.id) is not None

        await pipeline.remember(RememberInput(content="standup note 3"))
        assert len([r for r in await storage.get_all() if r.kind == MemoryKind.SUMMARY]) == 1


    @pytest.mark.asyncio
    async def test_retired_sources_leave_no_derived_state(
            self, v, memory_service, storage, llm_service, versioning, clock
    ):
        cache = LRUWorkingMemory(storage, capacity=5, time_provider=clock, v=v)
        consolidator = TemporalConsolidationService(
            memory_service, llm_service, ConsolidationSettings(min_memories=2, retire_sources=True), v=v,
        )
        pipeline = AugmentedMemoryService(
            memory_service, working_memory=cache, versioning_service=versioning,
            consolidation_service=consolidator, v=v,
        )
        llm_service.generate.return_value = "Both notes in one"

        first = await pipeline.remember(RememberInput(content="note one"))
        second = await pipeline.remember(RememberInput(content="note two"))

        stored = {r.id for r in await storage.get_all()}
        assert first.id not in stored and second.id not in stored
        assert len(stored) == 1
        assert {r.id for r in pipeline.get_context()} <= stored
        assert pipeline.get_history(first.id) == []
        assert pipeline.get_history(second.id) == []


class TestFacade:
    @pytest.mark.asyncio
    async def test_recall_with_graph_expands_seeds(self, v, memory_service, graph):
        pipeline = AugmentedMemoryService(memory_service, graph=graph, v=v)
        seed = await pipeline.remember(RememberInput(content="alpha project kickoff", embedding=X_AXIS))
        linked = await pipeline.remember(RememberInput(content="launch approved", embedding=[0.99, 0.01]))
        await pipeline.remember(RememberInput(content="holiday photos", embedding=[0.0, 1.0]))

        result = await pipeline.recall_with_graph("alpha")

        assert [r.id for r in result] == [seed.id, linked.id]

    @pytest.mark.asyncio
    async def test_recall_with_graph_without_graph(self, v, memory_service):
        pipeline = AugmentedMemoryService(memory_service, v=v)
        record = await pipeline.remember(RememberInput(content="alpha"))
        assert [r.id for r in await pipeline.recall_with_graph("alpha")] == [record.id]

    @pytest.mark.asyncio
    async def test_forget_drops_derived_state(self, v, memory_service, storage, graph, clock):
        cache = LRUWorkingMemory(storage, capacity=5, time_provider=clock, v=v)
        pipeline = AugmentedMemoryService(memory_service, graph=graph, working_memory=cache, v=v)
        a = await pipeline.remember(RememberInput(content="a", embedding=X_AXIS))
        b = await pipeline.remember(RememberInput(content="b", embedding=X_AXIS))
        assert pipeline.get_related_memories(b.id) == [a.id]

        assert await pipeline.forget(a.id) is True
        assert a.id not in cache
        assert pipeline.get_related_memories(b.id) == []
        assert [r.id for r in pipeline.get_context()] == [b.id]
        assert await pipeline.forget(a.id) is False

    @pytest.mark.asyncio
    async def test_update_and_rollback(self, v, memory_service, storage, versioning, clock):
        pipeline = AugmentedMemoryService(memory_service, versioning_service=versioning, v=v)
        record = await pipeline.remember(RememberInput(content="Works at Acme"))
        clock.advance(days=1)

        updated = await pipeline.update_content(record.id, "Works at Globex", reason="job change")

        assert updated.content == "Works at Globex"
        assert updated.updated_at == clock.now()
        assert [(s.version, s.reason) for s in pipeline.get_history(record.id)] == [(1, "initial"), (2, "job change")]

        restored = await pipeline.rollback(record.id, 1)
        assert restored.content == "Works at Acme"
        assert (await storage.get(record.id)).content == "Works at Acme"
        assert len(pipeline.get_history(record.id)) == 1

        assert await pipeline.rollback(record.id, 5) is None
        assert await pipeline.update_content("mem_missing", "x") is None

    @pytest.mark.asyncio
    async def test_rollback_without_versioning(self, v, memory_service):
        pipeline = AugmentedMemoryService(memory_service, v=v)
        record = await pipeline.remember(RememberInput(content="x"))
        assert await pipeline.rollback(record.id, 1) is None
        assert pipeline.get_history(record.id) == []

    @pytest.mark.asyncio
    async def test_get_by_category(self, v, memory_service, llm_service):
        hierarchy = DefaultHierarchyService(llm_service, v=v)
        pipeline = AugmentedMemoryService(memory_service, hierarchy_service=hierarchy, v=v)
        llm_service.generate.return_value = '["food/breakfast"]'

        record = await pipeline.remember(RememberInput(content="Oatmeal every day"))

        assert pipeline.get_by_category("food") == [record.id]
        assert (await pipeline.inspect(record.id)).categories == ["food/breakfast"]

    @pytest.mark.asyncio
    async def test_infer(self, v, memory_service, llm_service):
        pipeline = AugmentedMemoryService(memory_service, v=v)
        with pytest.raises(LLMNotConfiguredError):
            await pipeline.infer("anything")

        pipeline = AugmentedMemoryService(
            memory_service, reasoning_service=DefaultReasoningService(llm_service, v=v), v=v,
        )
        record = await pipeline.remember(RememberInput(content="Allergic to shellfish"))
        llm_service.generate.return_value = f'{{"answer": "No shrimp", "confidence": 0.9, "sources": ["{record.id}"]}}'

        result = await pipeline.infer("shellfish allergy?")
        assert result.answer == "No shrimp"
        assert result.sources == [record.id]

    @pytest.mark.asyncio
    async def test_analytics(self, v, memory_service):
        pipeline = AugmentedMemoryService(memory_service, analytics_service=DefaultAnalyticsService(v=v), v=v)
        await pipeline.remember(RememberInput(content="one", kind=MemoryKind.PREFERENCE))
        await pipeline.remember(RememberInput(content="two"))

        analytics = await pipeline.analytics()
        assert analytics.total_memories == 2
        assert analytics.by_kind == {"preference": 1, "fact": 1}
        assert await pipeline.insights() == []

    @pytest.mark.asyncio
    async def test_clear_resets_derived_state(self, v, memory_service, storage, graph, versioning, clock):
        cache = LRUWorkingMemory(storage, capacity=5, time_provider=clock, v=v)
        pipeline = AugmentedMemoryService(
            memory_service, graph=graph, working_memory=cache, versioning_service=versioning, v=v,
        )
        a = await pipeline.remember(RememberInput(content="a", embedding=X_AXIS))
        await pipeline.remember(RememberInput(content="b", embedding=X_AXIS))

        await pipeline.clear()

        assert await storage.get_all() == []
        assert graph.edge_count == 0
        assert cache.size == 0
        assert pipeline.get_history(a.id) == []
