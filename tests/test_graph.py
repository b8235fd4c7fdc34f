"""Tests for ego-graph derivation."""

from __future__ import annotations

from paper_network.graph import GraphRenderer, build_ego_graph, build_for_selection
from paper_network.models import (
    EMPTY_GRAPH,
    DataSnapshot,
    GraphLink,
    GraphNode,
    GraphPolicy,
    GraphViewModel,
    NodeRole,
    Paper,
)


class TestBuildEgoGraph:
    def test_worked_example(self):
        graph = build_ego_graph(1, {1: "Deep Learning", 2: "Neural Nets"}, {1: [2]})
        assert graph == GraphViewModel(
            nodes=(
                GraphNode(id=1, label="Deep Learning", role=NodeRole.CENTER, size=10),
                GraphNode(id=2, label="Neural Nets", role=NodeRole.NEIGHBOR, size=5),
            ),
            links=(GraphLink(source=1, target=2),),
        )

    def test_missing_adjacency_key_gives_single_node(self):
        graph = build_ego_graph(5, {1: "Deep Learning"}, {1: [2]})
        assert graph.nodes == (
            GraphNode(id=5, label="Unknown paper", role=NodeRole.CENTER, size=10),
        )
        assert graph.links == ()

    def test_empty_neighbor_list_gives_single_node(self):
        graph = build_ego_graph(3, {3: "Alone"}, {3: []})
        assert len(graph.nodes) == 1
        assert graph.links == ()

    def test_custom_fallback_title(self):
        graph = build_ego_graph(1, {}, {1: [2]}, fallback_title="Title unavailable")
        assert [node.label for node in graph.nodes] == ["Title unavailable", "Title unavailable"]

    def test_node_and_link_counts_follow_adjacency(self):
        adjacency = {1: [2, 3, 4]}
        graph = build_ego_graph(1, {}, adjacency)
        assert len(graph.nodes) == 1 + len(adjacency[1])
        assert len(graph.links) == len(adjacency[1])

    def test_neighbors_keep_adjacency_order(self):
        graph = build_ego_graph(1, {}, {1: [9, 4, 7]})
        assert [node.id for node in graph.nodes] == [1, 9, 4, 7]

    def test_links_point_from_center(self):
        graph = build_ego_graph(1, {}, {1: [2, 3]})
        assert all(link.source == 1 for link in graph.links)
        assert [link.target for link in graph.links] == [2, 3]

    def test_exactly_one_center(self):
        graph = build_ego_graph(1, {}, {1: [2, 3]})
        roles = [node.role for node in graph.nodes]
        assert roles.count(NodeRole.CENTER) == 1
        assert graph.center is not None
        assert graph.center.id == 1

    def test_idempotent(self, sample_snapshot):
        first = build_ego_graph(1, sample_snapshot.title_index, sample_snapshot.adjacency)
        second = build_ego_graph(1, sample_snapshot.title_index, sample_snapshot.adjacency)
        assert first == second

    def test_self_loop_is_kept(self):
        graph = build_ego_graph(1, {1: "Self"}, {1: [1]})
        assert len(graph.nodes) == 2
        assert graph.links == (GraphLink(source=1, target=1),)


class TestBuildForSelection:
    def test_no_selection_is_empty(self, sample_snapshot):
        assert build_for_selection(None, sample_snapshot, GraphPolicy()) is EMPTY_GRAPH

    def test_no_snapshot_is_empty(self):
        assert build_for_selection(1, None, GraphPolicy()) is EMPTY_GRAPH

    def test_uses_policy_fallback(self, sample_snapshot):
        graph = build_for_selection(1, sample_snapshot, GraphPolicy(fallback_title="?"))
        assert graph.node_by_id(99).label == "?"


class TestGraphViewModel:
    def test_empty_graph_properties(self):
        assert EMPTY_GRAPH.is_empty
        assert EMPTY_GRAPH.center is None
        assert EMPTY_GRAPH.node_by_id(1) is None


def test_snapshot_get_paper(sample_snapshot):
    assert sample_snapshot.get_paper(1) == Paper(id=1, title="Attention Is All You Need")
    assert sample_snapshot.get_paper(99) is None


def test_popular_papers_are_first_ten(make_entry):
    snapshot = DataSnapshot.freeze({}, {}, [make_entry(i, f"P{i}") for i in range(15)])
    assert [entry.id for entry in snapshot.popular_papers] == list(range(10))


def test_terminal_graph_view_is_a_renderer():
    from paper_network.widgets import EgoGraphView

    assert isinstance(EgoGraphView(), GraphRenderer)
