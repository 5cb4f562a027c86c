"""Tests for the relationship graph builder."""

from math import sqrt

import pytest

from moltbook_explorer.core.graphs import (
    accumulate_node_weights,
    apply_threshold,
    author_community_graph,
    bridge_authors,
    build_weighted_graph,
    cooccurrence_graph,
    normalize_edges,
)
from moltbook_explorer.models import Post


def _edge_pairs(graph):
    return [(e.source, e.target) for e in graph.edges]


def _bridge_posts():
    rows = [
        ("x", "m1"), ("x", "m1"), ("x", "m1"), ("x", "m2"),
        ("y", "m1"), ("y", "m2"), ("y", "m3"),
        ("z", "m1"),
    ]
    return [Post(post_id=f"p{i}", author_name=a, submolt_name=s) for i, (a, s) in enumerate(rows)]


class TestPipelinePasses:
    """The weight and normalization passes are usable on their own."""

    def test_repeated_pairs_add_up(self):
        graph = build_weighted_graph([("a", "b", 2), ("b", "a", 3)])
        assert graph.number_of_edges() == 1
        assert graph["a"]["b"]["weight"] == 5

    def test_accumulate_node_weights(self):
        graph = build_weighted_graph([("a", "b", 2), ("a", "c", 3)])
        weights = accumulate_node_weights(graph)
        assert weights == {"a": 5, "b": 2, "c": 3}
        assert graph.nodes["a"]["weight"] == 5

    def test_normalize_skips_zero_weight(self):
        graph = build_weighted_graph([("a", "b", 0), ("a", "c", 5)])
        normalize_edges(graph, lambda a, b: 10)
        assert "normalized_weight" not in graph["a"]["b"]
        assert graph["a"]["c"]["normalized_weight"] == 50.0

    def test_apply_threshold_is_inclusive_and_drops_isolated_nodes(self):
        graph = build_weighted_graph([("a", "b", 1), ("a", "c", 2)])
        normalize_edges(graph, lambda a, b: 4)
        kept = apply_threshold(graph, 50)
        assert kept.number_of_edges() == 1
        assert kept.has_edge("a", "c")
        assert set(kept.nodes()) == {"a", "c"}


class TestCooccurrenceGraph:
    """Test cases for cooccurrence_graph."""

    def test_normalized_against_heavier_endpoint(self, index):
        graph = cooccurrence_graph(index.tag_edges, 0)
        weights = {(e.source, e.target): e.normalized_weight for e in graph.edges}
        assert weights[("topic:ai", "mood:happy")] == pytest.approx(25.0)
        assert weights[("topic:ai", "topic:agents")] == pytest.approx(75.0)
        assert weights[("topic:agents", "lang")] == pytest.approx(100 / 7)

    def test_values_within_bounds(self, index):
        graph = cooccurrence_graph(index.tag_edges, 0)
        assert all(0 < e.normalized_weight <= 100 for e in graph.edges)

    def test_zero_threshold_keeps_weighted_edges(self, index):
        graph = cooccurrence_graph(index.tag_edges, 0)
        assert len(graph.edges) == 3
        assert "orphan:a" not in {n.id for n in graph.nodes}

    def test_threshold_drops_edges_and_isolated_nodes(self, index):
        graph = cooccurrence_graph(index.tag_edges, 20)
        assert _edge_pairs(graph) == [("topic:ai", "mood:happy"), ("topic:ai", "topic:agents")]
        assert [n.id for n in graph.nodes] == ["topic:ai", "mood:happy", "topic:agents"]

    def test_threshold_above_hundred_returns_nothing(self, index):
        graph = cooccurrence_graph(index.tag_edges, 100.5)
        assert graph.edges == []
        assert graph.nodes == []
        assert graph.is_empty()

    def test_node_attributes(self, index):
        nodes = {n.id: n for n in cooccurrence_graph(index.tag_edges, 0).nodes}
        assert nodes["topic:ai"].label == "ai"
        assert nodes["topic:ai"].group == "topic"
        assert nodes["topic:ai"].weight == 8
        assert nodes["topic:ai"].size == pytest.approx(sqrt(8) * 0.5 + 4)
        assert nodes["lang"].group == "other"

    def test_no_edges(self):
        assert cooccurrence_graph([], 10).is_empty()


class TestAuthorCommunityGraph:
    """Test cases for the bipartite bridge-author graph."""

    def test_bridge_authors_ranked_by_distinct_communities(self):
        bridges = bridge_authors(_bridge_posts())
        assert [a for a, _ in bridges] == ["y", "x"]
        assert bridges[1][1] == {"m1": 3, "m2": 1}

    def test_bridge_cap(self):
        assert [a for a, _ in bridge_authors(_bridge_posts(), max_authors=1)] == ["y"]

    def test_normalized_against_largest_pair_count(self):
        graph = author_community_graph(_bridge_posts(), 0)
        weights = {(e.source, e.target): e.normalized_weight for e in graph.edges}
        assert weights[("a:x", "s:m1")] == pytest.approx(100.0)
        assert weights[("a:x", "s:m2")] == pytest.approx(100 / 3)
        assert weights[("a:y", "s:m3")] == pytest.approx(100 / 3)
        assert "a:z" not in {n.id for n in graph.nodes}

    def test_threshold(self):
        graph = author_community_graph(_bridge_posts(), 50)
        assert _edge_pairs(graph) == [("a:x", "s:m1")]
        assert [(n.id, n.group, n.label) for n in graph.nodes] == [
            ("a:x", "author", "x"), ("s:m1", "submolt", "m1"),
        ]

    def test_node_sizes_and_weights(self, index):
        graph = author_community_graph(index.posts, 10)
        nodes = {n.id: n for n in graph.nodes}
        assert set(nodes) == {"a:alice", "s:general", "s:tech"}
        assert nodes["a:alice"].size == 10
        assert nodes["s:tech"].size == 6
        assert nodes["a:alice"].weight == 2

    def test_no_bridge_authors(self):
        posts = [Post(post_id="p1", author_name="solo", submolt_name="m1")]
        assert author_community_graph(posts, 10).is_empty()
