"""Relation Graph - similarity-derived edges between records."""
from abc import ABC, abstractmethod

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...models.memory import MemoryRecord
from ...models.relation import Relation
from .._constants import EXT_RELATION_GRAPH

MNEMOFLOW_RELATION_GRAPH = 'MNEMOFLOW_RELATION_GRAPH'
DEFAULT_MNEMOFLOW_RELATION_GRAPH = 'default'

# Minimum cosine similarity (exclusive) for auto-created relates_to edges
MNEMOFLOW_GRAPH_SIMILARITY_THRESHOLD = 'MNEMOFLOW_GRAPH_SIMILARITY_THRESHOLD'
DEFAULT_MNEMOFLOW_GRAPH_SIMILARITY_THRESHOLD = 0.85

DEFAULT_TRAVERSAL_DEPTH = 2


class RelationGraph(ABC):
    """Interface for the process-local relation graph."""

    @abstractmethod
    def add_memory(self, record: MemoryRecord, existing: list[MemoryRecord]) -> list[Relation]:
        """Link a new record to every existing record above the similarity threshold.

        Returns:
            Edges created (new -> existing)
        """
        pass

    @abstractmethod
    def add_relation(self, relation: Relation) -> None:
        pass

    @abstractmethod
    def get_relations(self, record_id: str) -> list[Relation]:
        """Edges touching a record, in either direction."""
        pass

    @abstractmethod
    def get_related_memories(self, record_id: str, max_depth: int = DEFAULT_TRAVERSAL_DEPTH) -> list[str]:
        """Ids reachable within ``max_depth`` hops, edges treated as undirected, seed excluded."""
        pass

    @abstractmethod
    def remove_memory(self, record_id: str) -> int:
        """Drop every edge touching a record. Returns number of edges removed."""
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


# noinspection PyAbstractClass
class RelationGraphPluginBase(Plugin):
    """Base plugin for relation graph."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_RELATION_GRAPH}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_RELATION_GRAPH

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_RELATION_GRAPH, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_RELATION_GRAPH, DEFAULT_MNEMOFLOW_RELATION_GRAPH)
        v.set_default_value(MNEMOFLOW_GRAPH_SIMILARITY_THRESHOLD, DEFAULT_MNEMOFLOW_GRAPH_SIMILARITY_THRESHOLD)
