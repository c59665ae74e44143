import networkx as nx
import pytest

from grocery_affinity.graph import communities as communities_module
from grocery_affinity.graph.communities import (
    collapse_to_undirected,
    community_membership,
    detect_communities,
)


def _two_triangles():
    graph = nx.MultiDiGraph()
    for u, v in [("a", "b"), ("b", "c"), ("c", "a"), ("x", "y"), ("y", "z"), ("z", "x")]:
        graph.add_edge(u, v, confidence=0.9, weight=9.0)
    graph.add_edge("c", "x", confidence=0.1, weight=1.0)
    return graph


class TestCollapse:
    def test_sums_reciprocal_and_parallel_edges(self):
        graph = nx.MultiDiGraph()
        graph.add_node(1, label="Milk")
        graph.add_edge(1, 2, weight=5.0)
        graph.add_edge(2, 1, weight=3.0)
        graph.add_edge(1, 2, weight=2.0)

        undirected = collapse_to_undirected(graph)
        assert not undirected.is_directed()
        assert undirected.number_of_edges() == 1
        assert undirected[1][2]["weight"] == 10.0
        assert undirected.nodes[1]["label"] == "Milk"


class TestDetectCommunities:
    def test_partitions_connected_graph(self):
        undirected = collapse_to_undirected(_two_triangles())
        communities = detect_communities(undirected)

        union = set().union(*communities)
        assert union == set(undirected.nodes)
        assert sum(len(c) for c in communities) == undirected.number_of_nodes()

    def test_splits_weakly_joined_groups(self):
        communities = detect_communities(collapse_to_undirected(_two_triangles()))
        assert sorted(sorted(c) for c in communities) == [["a", "b", "c"], ["x", "y", "z"]]

    def test_empty_graph(self):
        assert detect_communities(nx.Graph()) == []

    def test_edgeless_graph(self):
        graph = nx.Graph()
        graph.add_nodes_from([1, 2])
        assert detect_communities(graph) == [{1}, {2}]


def test_community_membership():
    assert community_membership([{"a", "b"}, {"c"}]) == {"a": 0, "b": 0, "c": 1}


class TestHierarchyBounds:
    @pytest.fixture
    def levels(self, monkeypatch):
        levels = []

        def flat_hierarchy(graph):
            while True:
                levels.append(1)
                yield [set(graph.nodes)]

        monkeypatch.setattr(communities_module, "girvan_newman", flat_hierarchy)
        return levels

    def test_stops_when_modularity_stops_improving(self, levels):
        assert detect_communities(nx.path_graph(4), patience=3) == [{0, 1, 2, 3}]
        assert len(levels) == 3

    def test_max_levels(self, levels):
        detect_communities(nx.path_graph(4), max_levels=2, patience=10)
        assert len(levels) == 2
