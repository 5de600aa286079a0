"""In-process relation graph with breadth-first reachability."""
from collections import defaultdict, deque
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables, get_logger

from ...models.memory import MemoryRecord
from ...models.relation import Relation, RelationKind
from ...utils import cosine_similarities, TimeProvider, SystemTimeProvider
from .base import (
    RelationGraph, RelationGraphPluginBase, DEFAULT_TRAVERSAL_DEPTH,
    MNEMOFLOW_GRAPH_SIMILARITY_THRESHOLD, DEFAULT_MNEMOFLOW_GRAPH_SIMILARITY_THRESHOLD,
)


class InMemoryRelationGraph(RelationGraph):
    """
    Adjacency-list graph held in process memory.

    Insertion compares the new record against every existing record, so it is O(n) per insert.
    Edges are stored once; an undirected neighbor index serves traversal.
    """

    def __init__(
            self,
            similarity_threshold: float = DEFAULT_MNEMOFLOW_GRAPH_SIMILARITY_THRESHOLD,
            time_provider: Optional[TimeProvider] = None,
            v: Variables = None,
    ):
        self.similarity_threshold = similarity_threshold
        self.time = time_provider or SystemTimeProvider()
        self._edges: dict[tuple[str, str, RelationKind], Relation] = {}
        self._neighbors: dict[str, set[str]] = defaultdict(set)
        self.logger = get_logger(v, name=self.__class__.__name__)
        self.logger.info("Initialized InMemoryRelationGraph with similarity_threshold=%s", similarity_threshold)

    def add_memory(self, record: MemoryRecord, existing: list[MemoryRecord]) -> list[Relation]:
        if not record.embedding:
            self.logger.debug("Record %s has no embedding, skipping graph insertion", record.id)
            return []

        others = [r for r in existing if r.id != record.id and r.embedding]
        similarities = cosine_similarities(record.embedding, [r.embedding for r in others])

        created = []
        for other, similarity in zip(others, similarities):
            if similarity > self.similarity_threshold:
                relation = Relation(
                    from_id=record.id,
                    to_id=other.id,
                    kind=RelationKind.RELATES_TO,
                    strength=min(1.0, similarity),
                    created_at=self.time.now(),
                )
                self.add_relation(relation)
                created.append(relation)

        self.logger.debug("Graph insert %s: %s edges from %s candidates", record.id, len(created), len(others))
        return created

    def add_relation(self, relation: Relation) -> None:
        self._edges[(relation.from_id, relation.to_id, relation.kind)] = relation
        self._neighbors[relation.from_id].add(relation.to_id)
        self._neighbors[relation.to_id].add(relation.from_id)

    def get_relations(self, record_id: str) -> list[Relation]:
        return [e for e in self._edges.values() if record_id in (e.from_id, e.to_id)]

    def get_related_memories(self, record_id: str, max_depth: int = DEFAULT_TRAVERSAL_DEPTH) -> list[str]:
        visited = {record_id}
        related = []
        queue = deque([(record_id, 0)])
        while queue:
            current, depth = queue.popleft()
            if depth >= max_depth:
                continue
            for neighbor in sorted(self._neighbors.get(current, ())):
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                related.append(neighbor)
                queue.append((neighbor, depth + 1))
        return related

    def remove_memory(self, record_id: str) -> int:
        doomed = [key for key, e in self._edges.items() if record_id in (e.from_id, e.to_id)]
        for key in doomed:
            del self._edges[key]
        for neighbor in self._neighbors.pop(record_id, set()):
            self._neighbors[neighbor].discard(record_id)
        return len(doomed)

    def clear(self) -> None:
        self._edges.clear()
        self._neighbors.clear()

    @property
    def edge_count(self) -> int:
        return len(self._edges)


class DefaultRelationGraphPlugin(RelationGraphPluginBase):
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> InMemoryRelationGraph:
        return InMemoryRelationGraph(
            similarity_threshold=v.environ(
                MNEMOFLOW_GRAPH_SIMILARITY_THRESHOLD, default=DEFAULT_MNEMOFLOW_GRAPH_SIMILARITY_THRESHOLD,
                type_fn=float,
            ),
            v=v,
        )
