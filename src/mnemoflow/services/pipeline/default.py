"""
Augmented memory service: the core memory service wrapped in optional stages.

On remember, stages run strictly in this order:

1. persist the base record
2. initial version snapshot
3. importance scoring
4. contradiction detection and resolution (keep_old ends the pipeline)
5. relation graph insertion
6. hierarchical categorization
7. persist metadata written by stages 3-6
8. working cache activation
9. episodic extraction (event records only)
10. consolidation check

A component passed as None is a disabled stage. The corpus is read once, right after
step 1, and that snapshot feeds contradiction, graph, and consolidation.
"""
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables, get_logger, ext_parse_bool

from ...config import (
    MNEMOFLOW_ENABLE_GRAPH, MNEMOFLOW_ENABLE_DUAL_MEMORY, MNEMOFLOW_ENABLE_WORKING_MEMORY,
    MNEMOFLOW_ENABLE_IMPORTANCE_SCORING, MNEMOFLOW_ENABLE_CONTRADICTION_DETECTION, MNEMOFLOW_ENABLE_HIERARCHY,
    MNEMOFLOW_ENABLE_VERSIONING, MNEMOFLOW_ENABLE_CONSOLIDATION, MNEMOFLOW_ENABLE_REASONING,
    DEFAULT_MNEMOFLOW_STAGE_ENABLED,
)
from ...models.memory import (
    MemoryRecord, MemoryKind, RememberInput, SummarizeScope,
    META_IMPORTANCE, META_CATEGORIES, META_CONTRADICTS, META_RESOLUTION,
)
from ...models.relation import Relation, RelationKind
from ...utils import TimeProvider, SystemTimeProvider
from .._constants import (
    EXT_MEMORY_SERVICE, EXT_EMBEDDING_SERVICE, EXT_LLM_SERVICE,
    EXT_RELATION_GRAPH, EXT_WORKING_MEMORY, EXT_IMPORTANCE_SCORER, EXT_CONTRADICTION_SERVICE,
    EXT_HIERARCHY_SERVICE, EXT_VERSIONING_SERVICE, EXT_DUAL_MEMORY_SERVICE, EXT_CONSOLIDATION_SERVICE,
    EXT_REASONING_SERVICE, EXT_ANALYTICS_SERVICE,
)
from ..analytics import AnalyticsService, MemoryAnalytics
from ..consolidation import ConsolidationService
from ..contradiction import ContradictionService, ContradictionResolution
from ..dual_memory import DualMemoryService, DualRecall
from ..embedding import embedding_enabled
from ..graph import RelationGraph
from ..hierarchy import HierarchyService
from ..importance import ImportanceScorer
from ..llm import LLMNotConfiguredError, generation_available
from ..memory import MemoryService
from ..reasoning import ReasoningService, InferenceResult
from ..versioning import VersioningService, VersionSnapshot
from ..working_memory import WorkingMemory
from .base import PipelineServicePluginBase, DEFAULT_GRAPH_RECALL_DEPTH, GRAPH_RECALL_SEED_LIMIT

UPDATE_VERSION_REASON = 'update'


class AugmentedMemoryService:
    """Memory service facade that runs the enabled augmentation stages."""

    def __init__(
            self,
            memory_service: MemoryService,
            graph: Optional[RelationGraph] = None,
            working_memory: Optional[WorkingMemory] = None,
            importance_scorer: Optional[ImportanceScorer] = None,
            contradiction_service: Optional[ContradictionService] = None,
            hierarchy_service: Optional[HierarchyService] = None,
            versioning_service: Optional[VersioningService] = None,
            dual_memory_service: Optional[DualMemoryService] = None,
            consolidation_service: Optional[ConsolidationService] = None,
            reasoning_service: Optional[ReasoningService] = None,
            analytics_service: Optional[AnalyticsService] = None,
            time_provider: Optional[TimeProvider] = None,
            v: Variables = None,
    ):
        self.memory_service = memory_service
        self.graph = graph
        self.working_memory = working_memory
        self.importance_scorer = importance_scorer
        self.contradiction_service = contradiction_service
        self.hierarchy_service = hierarchy_service
        self.versioning_service = versioning_service
        self.dual_memory_service = dual_memory_service
        self.consolidation_service = consolidation_service
        self.reasoning_service = reasoning_service
        self.analytics_service = analytics_service
        self.time = time_provider or memory_service.time or SystemTimeProvider()
        self.logger = get_logger(v, name=self.__class__.__name__)
        self.logger.info("Initialized AugmentedMemoryService with stages: %s", ", ".join(self.enabled_stages) or "none")

    @property
    def storage(self):
        return self.memory_service.storage

    @property
    def enabled_stages(self) -> list[str]:
        stages = {
            'versioning': self.versioning_service,
            'importance': self.importance_scorer,
            'contradiction': self.contradiction_service,
            'graph': self.graph,
            'hierarchy': self.hierarchy_service,
            'working_memory': self.working_memory,
            'dual_memory': self.dual_memory_service,
            'consolidation': self.consolidation_service,
            'reasoning': self.reasoning_service,
        }
        return [name for name, component in stages.items() if component is not None]

    async def remember(self, input: RememberInput) -> MemoryRecord:
        """Store a record and run every enabled stage on it.

        Returns the stored record, or the pre-existing record when a contradiction
        resolves to keep_old (the new record is deleted in that case).
        """
        record = await self.memory_service.remember(input)

        if self.versioning_service is not None:
            self.versioning_service.record_version(record.id, record.content)

        needs_corpus = (
                self.contradiction_service is not None
                or self.graph is not None
                or self.consolidation_service is not None
        )
        corpus = await self.storage.get_all() if needs_corpus else []
        existing = [r for r in corpus if r.id != record.id]
        dirty = False

        if self.importance_scorer is not None:
            record.set_meta(META_IMPORTANCE, await self.importance_scorer.score(record))
            dirty = True

        pending_edges: list[Relation] = []
        if self.contradiction_service is not None:
            kept = await self._resolve_contradictions(record, existing, pending_edges)
            if kept is not None:
                return kept
            dirty = dirty or bool(pending_edges)

        if self.graph is not None:
            self.graph.add_memory(record, existing)
            for edge in pending_edges:
                self.graph.add_relation(edge)

        if self.hierarchy_service is not None:
            record.set_meta(META_CATEGORIES, await self.hierarchy_service.organize(record))
            dirty = True

        if dirty:
            await self.storage.save(record)

        if self.working_memory is not None:
            await self.working_memory.activate(record)

        if self.dual_memory_service is not None and record.kind == MemoryKind.EVENT:
            await self.dual_memory_service.add_episode(record)

        if self.consolidation_service is not None:
            snapshot = [record if r.id == record.id else r for r in corpus]
            if self.consolidation_service.should_consolidate(snapshot, self.time.now()):
                summary = await self.consolidation_service.consolidate(snapshot, forget=self.forget)
                if summary is not None and self.versioning_service is not None:
                    self.versioning_service.record_version(summary.id, summary.content)

        return record

    async def _resolve_contradictions(
            self, record: MemoryRecord, existing: list[MemoryRecord], pending_edges: list[Relation]
    ) -> Optional[MemoryRecord]:
        """Returns the record to keep when keep_old wins, otherwise annotates ``record`` in place."""
        contradictions = await self.contradiction_service.detect(record, existing)
        for contradiction in contradictions:
            resolution = await self.contradiction_service.resolve(record, contradiction.existing)
            contradiction.resolution = resolution
            self.logger.info(
                "Contradiction %s between %s and %s resolved as %s",
                contradiction.id, record.id, contradiction.existing.id, resolution.value,
            )

            if resolution == ContradictionResolution.KEEP_OLD:
                await self.storage.delete(record.id)
                self._drop_derived(record.id)
                return contradiction.existing

            ids = list((record.metadata or {}).get(META_CONTRADICTS) or [])
            ids.append(contradiction.existing.id)
            record.set_meta(META_CONTRADICTS, ids)
            record.set_meta(META_RESOLUTION, resolution.value)
            pending_edges.append(Relation(
                from_id=record.id,
                to_id=contradiction.existing.id,
                kind=RelationKind.CONTRADICTS,
                strength=max(0.0, min(1.0, contradiction.similarity)),
                created_at=contradiction.detected_at,
            ))
        return None

    async def recall(self, query: str, limit: Optional[int] = None) -> list[MemoryRecord]:
        return await self.memory_service.recall(query, limit)

    async def recall_with_graph(self, query: str, depth: int = DEFAULT_GRAPH_RECALL_DEPTH) -> list[MemoryRecord]:
        """Ranked seeds plus everything reachable from them within ``depth`` hops."""
        if self.graph is None:
            return await self.memory_service.recall(query)

        seeds = await self.memory_service.recall(query, GRAPH_RECALL_SEED_LIMIT)
        seed_ids = {r.id for r in seeds}
        related = set()
        for seed in seeds:
            related.update(self.graph.get_related_memories(seed.id, depth))
        related -= seed_ids

        expanded = [r for r in await self.storage.get_all() if r.id in related]
        self.logger.debug("Graph recall '%s': %s seeds, %s related", query, len(seeds), len(expanded))
        return seeds + expanded

    async def recall_dual(self, query: str, include_episodic: bool = True) -> DualRecall:
        if self.dual_memory_service is None:
            return DualRecall(semantic=[], episodic=[])
        return self.dual_memory_service.recall(query, include_episodic)

    async def summarize(self, scope: Optional[SummarizeScope] = None) -> str:
        return await self.memory_service.summarize(scope)

    async def forget(self, record_id: str) -> bool:
        self._drop_derived(record_id)
        return await self.memory_service.forget(record_id)

    def _drop_derived(self, record_id: str) -> None:
        if self.working_memory is not None:
            self.working_memory.remove(record_id)
        if self.graph is not None:
            self.graph.remove_memory(record_id)
        if self.hierarchy_service is not None:
            self.hierarchy_service.remove_memory(record_id)
        if self.versioning_service is not None:
            self.versioning_service.remove(record_id)
        if self.dual_memory_service is not None:
            self.dual_memory_service.remove_episode(record_id)

    async def inspect(self, record_id: str) -> Optional[MemoryRecord]:
        return await self.memory_service.inspect(record_id)

    async def clear(self) -> None:
        await self.memory_service.clear()
        for component in (
                self.working_memory, self.graph, self.hierarchy_service,
                self.versioning_service, self.dual_memory_service,
        ):
            if component is not None:
                component.clear()

    async def update_content(
            self, record_id: str, content: str, reason: str = UPDATE_VERSION_REASON
    ) -> Optional[MemoryRecord]:
        """Replace a record's content, re-embedding it and appending a version snapshot."""
        record = await self.storage.get(record_id)
        if record is None:
            return None

        record.content = content
        record.updated_at = self.time.now()
        await self._refresh_embedding(record)
        await self.storage.save(record)

        if self.versioning_service is not None:
            self.versioning_service.record_version(record_id, content, reason)
        self.logger.info("Updated content of %s (%s)", record_id, reason)
        return record

    async def rollback(self, record_id: str, to_version: int) -> Optional[MemoryRecord]:
        """Truncate history to ``to_version`` and restore that content. None when unavailable."""
        if self.versioning_service is None:
            return None
        record = await self.storage.get(record_id)
        if record is None:
            return None
        snapshot = self.versioning_service.rollback(record_id, to_version)
        if snapshot is None:
            return None

        record.content = snapshot.content
        record.updated_at = self.time.now()
        await self._refresh_embedding(record)
        await self.storage.save(record)
        return record

    async def _refresh_embedding(self, record: MemoryRecord) -> None:
        embedding_service = self.memory_service.embedding_service
        if embedding_service is None or not self.memory_service.auto_embed:
            return
        try:
            record.embedding = await embedding_service.embed(record.content)
        except Exception as e:
            self.logger.warning("Re-embedding %s failed, keeping previous embedding: %s", record.id, e)

    def get_history(self, record_id: str) -> list[VersionSnapshot]:
        if self.versioning_service is None:
            return []
        return self.versioning_service.get_history(record_id)

    def get_by_category(self, path: str) -> list[str]:
        if self.hierarchy_service is None:
            return []
        return self.hierarchy_service.get_by_category(path)

    def get_related_memories(self, record_id: str, max_depth: int = DEFAULT_GRAPH_RECALL_DEPTH) -> list[str]:
        if self.graph is None:
            return []
        return self.graph.get_related_memories(record_id, max_depth)

    def get_context(self) -> list[MemoryRecord]:
        if self.working_memory is None:
            return []
        return self.working_memory.get_context()

    async def infer(self, question: str, limit: Optional[int] = None) -> InferenceResult:
        """Answer a question from the records recall ranks highest for it.

        Raises:
            LLMNotConfiguredError: reasoning is disabled or no generation port is configured
        """
        if self.reasoning_service is None:
            raise LLMNotConfiguredError("infer() requires reasoning to be enabled with a generation provider")
        records = await self.memory_service.recall(question, limit)
        return await self.reasoning_service.infer(records, question)

    async def find_gaps(self) -> list[str]:
        if self.reasoning_service is None:
            raise LLMNotConfiguredError("find_gaps() requires reasoning to be enabled with a generation provider")
        return await self.reasoning_service.find_gaps(await self.storage.get_all())

    async def detect_patterns(self) -> list[str]:
        if self.reasoning_service is None:
            raise LLMNotConfiguredError("detect_patterns() requires reasoning to be enabled with a generation provider")
        return await self.reasoning_service.detect_patterns(await self.storage.get_all())

    async def analytics(self) -> MemoryAnalytics:
        if self.analytics_service is None:
            raise ValueError("No analytics service configured")
        return self.analytics_service.generate_analytics(await self.storage.get_all(), self.time.now())

    async def insights(self) -> list[str]:
        return self.analytics_service.generate_insights(await self.analytics())


class DefaultPipelineServicePlugin(PipelineServicePluginBase):
    """Wires each enabled stage whose required ports are available."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> AugmentedMemoryService:
        def flag(key: str) -> bool:
            return v.environ(key, default=DEFAULT_MNEMOFLOW_STAGE_ENABLED, type_fn=ext_parse_bool)

        has_embedding = embedding_enabled(v)
        has_generation = generation_available(self.get_extension(EXT_LLM_SERVICE, v))
        if has_embedding:
            # resolved so the embedding service initializes ahead of the stages that use it
            self.get_extension(EXT_EMBEDDING_SERVICE, v)

        def stage(key: str, ext: str, *, embedding: bool = False, generation: bool = False):
            if not flag(key):
                return None
            if (embedding and not has_embedding) or (generation and not has_generation):
                logger.debug("Stage %s enabled but its required port is unavailable; skipping", key)
                return None
            return self.get_extension(ext, v)

        importance_scorer = stage(MNEMOFLOW_ENABLE_IMPORTANCE_SCORING, EXT_IMPORTANCE_SCORER)
        if importance_scorer is not None and importance_scorer.requires_generation and not has_generation:
            logger.debug("Importance scorer %s needs generation; skipping",
                         importance_scorer.__class__.__name__)
            importance_scorer = None

        return AugmentedMemoryService(
            memory_service=self.get_extension(EXT_MEMORY_SERVICE, v),
            graph=stage(MNEMOFLOW_ENABLE_GRAPH, EXT_RELATION_GRAPH, embedding=True),
            working_memory=stage(MNEMOFLOW_ENABLE_WORKING_MEMORY, EXT_WORKING_MEMORY),
            importance_scorer=importance_scorer,
            contradiction_service=stage(
                MNEMOFLOW_ENABLE_CONTRADICTION_DETECTION, EXT_CONTRADICTION_SERVICE, embedding=True, generation=True,
            ),
            hierarchy_service=stage(MNEMOFLOW_ENABLE_HIERARCHY, EXT_HIERARCHY_SERVICE, generation=True),
            versioning_service=stage(MNEMOFLOW_ENABLE_VERSIONING, EXT_VERSIONING_SERVICE),
            dual_memory_service=stage(MNEMOFLOW_ENABLE_DUAL_MEMORY, EXT_DUAL_MEMORY_SERVICE, generation=True),
            consolidation_service=stage(MNEMOFLOW_ENABLE_CONSOLIDATION, EXT_CONSOLIDATION_SERVICE, generation=True),
            reasoning_service=stage(MNEMOFLOW_ENABLE_REASONING, EXT_REASONING_SERVICE, generation=True),
            analytics_service=self.get_extension(EXT_ANALYTICS_SERVICE, v),
            v=v,
        )
