from .base import RelationGraph, RelationGraphPluginBase, DEFAULT_TRAVERSAL_DEPTH, EXT_RELATION_GRAPH
from .default import InMemoryRelationGraph

from scitrera_app_framework import Variables, get_extension


def get_relation_graph(v: Variables = None) -> RelationGraph:
    return get_extension(EXT_RELATION_GRAPH, v)


__all__ = (
    'RelationGraph',
    'RelationGraphPluginBase',
    'InMemoryRelationGraph',
    'get_relation_graph',
    'DEFAULT_TRAVERSAL_DEPTH',
    'EXT_RELATION_GRAPH',
)
