"""Tests for the relation graph: edge creation threshold and breadth-first reachability."""
import pytest

from mnemoflow.models.relation import Relation, RelationKind
from mnemoflow.services.graph import InMemoryRelationGraph


@pytest.fixture
def graph(v, clock):
    return InMemoryRelationGraph(similarity_threshold=0.85, time_provider=clock, v=v)


def link(graph, a, b, clock, kind=RelationKind.RELATES_TO):
    graph.add_relation(Relation(from_id=a, to_id=b, kind=kind, strength=0.9, created_at=clock.now()))


@pytest.fixture
def chain(graph, clock):
    """a -> b -> c -> d, plus e <- c (edges point both ways for traversal)."""
    link(graph, "a", "b", clock)
    link(graph, "b", "c", clock)
    link(graph, "c", "d", clock)
    link(graph, "e", "c", clock)
    return graph


class TestAddMemory:
    def test_edges_only_above_threshold(self, graph, make_record):
        new = make_record("new", embedding=[1.0, 0.0])
        close = make_record("close", embedding=[0.99, 0.05])
        far = make_record("far", embedding=[0.5, 0.5])

        created = graph.add_memory(new, [new, close, far])

        assert [(r.from_id, r.to_id) for r in created] == [(new.id, close.id)]
        assert created[0].kind == RelationKind.RELATES_TO
        assert 0.85 < created[0].strength <= 1.0

    def test_record_without_embedding_adds_nothing(self, graph, make_record):
        assert graph.add_memory(make_record("bare"), [make_record("x", embedding=[1.0])]) == []
        assert graph.edge_count == 0

    def test_existing_without_embedding_is_skipped(self, graph, make_record):
        new = make_record("new", embedding=[1.0, 0.0])
        assert graph.add_memory(new, [make_record("bare")]) == []


class TestTraversal:
    def test_depth_zero_is_empty(self, chain):
        assert chain.get_related_memories("a", 0) == []

    def test_depth_limits_hops(self, chain):
        assert set(chain.get_related_memories("a", 1)) == {"b"}
        assert set(chain.get_related_memories("a", 2)) == {"b", "c"}
        assert set(chain.get_related_memories("a", 3)) == {"b", "c", "d", "e"}

    def test_edges_are_traversed_both_ways(self, chain):
        assert set(chain.get_related_memories("d", 1)) == {"c"}
        assert set(chain.get_related_memories("c", 1)) == {"b", "d", "e"}

    def test_monotone_in_depth(self, chain):
        for seed in "abcde":
            for shallow in range(4):
                for deep in range(shallow + 1, 5):
                    assert set(chain.get_related_memories(seed, shallow)) <= set(chain.get_related_memories(seed, deep))

    def test_cycles_terminate_and_exclude_seed(self, graph, clock):
        link(graph, "x", "y", clock)
        link(graph, "y", "z", clock)
        link(graph, "z", "x", clock)
        related = graph.get_related_memories("x", 10)
        assert sorted(related) == ["y", "z"]

    def test_unknown_id(self, graph):
        assert graph.get_related_memories("nobody", 3) == []


class TestMaintenance:
    def test_get_relations(self, chain):
        assert {(r.from_id, r.to_id) for r in chain.get_relations("c")} == {("b", "c"), ("c", "d"), ("e", "c")}

    def test_remove_memory(self, chain):
        assert chain.remove_memory("c") == 3
        assert chain.get_related_memories("a", 5) == ["b"]
        assert chain.get_relations("d") == []

    def test_kinds_are_distinct_edges(self, graph, clock):
        link(graph, "a", "b", clock)
        link(graph, "a", "b", clock, kind=RelationKind.CONTRADICTS)
        assert graph.edge_count == 2

    def test_clear(self, chain):
        chain.clear()
        assert chain.edge_count == 0
        assert chain.get_related_memories("a", 3) == []
