"""
Relationship Graph Builder component for moltbook explorer.

Both graph flavors load their weighted pairs into a ``networkx`` graph and
run the same pipeline in separate passes:

1. accumulate node weights (weighted degree),
2. normalize each edge to a percentage of a flavor-specific scale,
3. keep the edge-induced subgraph of edges at or above the threshold,
   which drops nodes left without an edge.

No layout is computed here; node weight and size are exposed for whoever
renders the graph.
"""

from collections import Counter
from math import sqrt
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

import networkx as nx
from loguru import logger

from ..models import Graph, GraphEdge, GraphNode, Post, TagEdge
from .aggregation import OTHER_NAMESPACE, tag_prefix

WeightedPair = Tuple[str, str, float]
Scale = Callable[[str, str], float]
NodeStyle = Callable[[str, float], GraphNode]

AUTHOR_NODE_PREFIX = "a:"
SUBMOLT_NODE_PREFIX = "s:"
AUTHOR_NODE_SIZE = 10
SUBMOLT_NODE_SIZE = 6
MIN_BRIDGE_SUBMOLTS = 2


def build_weighted_graph(pairs: Iterable[WeightedPair]) -> nx.Graph:
    """Undirected graph of the pairs; a repeated pair adds to the edge weight."""
    graph = nx.Graph()
    for a, b, weight in pairs:
        if graph.has_edge(a, b):
            graph[a][b]["weight"] += weight
        else:
            graph.add_edge(a, b, weight=weight)
    return graph


def accumulate_node_weights(graph: nx.Graph) -> Dict[str, float]:
    """Store the sum of incident edge weight on every node and return it."""
    weights = dict(graph.degree(weight="weight"))
    nx.set_node_attributes(graph, weights, "weight")
    return weights


def normalize_edges(graph: nx.Graph, scale: Scale) -> None:
    """
    Set ``normalized_weight`` on each edge as a percentage of ``scale(a, b)``.

    Zero-weight edges carry no relationship and get no normalized weight,
    which keeps every normalized weight in ``(0, 100]``.
    """
    for a, b, data in graph.edges(data=True):
        if data["weight"] > 0:
            data["normalized_weight"] = data["weight"] / scale(a, b) * 100


def apply_threshold(graph: nx.Graph, threshold_percent: float) -> nx.Graph:
    """Subgraph induced by the edges whose normalized weight reaches ``threshold_percent``."""
    kept = [
        (a, b)
        for a, b, normalized in graph.edges(data="normalized_weight")
        if normalized is not None and normalized >= threshold_percent
    ]
    return graph.edge_subgraph(kept)


def _to_dto(subgraph: nx.Graph, pairs: Sequence[WeightedPair], style: NodeStyle) -> Graph:
    # Edges keep input orientation and order; nodes follow first appearance in them.
    edges: List[GraphEdge] = []
    nodes: Dict[str, GraphNode] = {}
    emitted = set()
    for a, b, _ in pairs:
        key = frozenset((a, b))
        if key in emitted or not subgraph.has_edge(a, b):
            continue
        emitted.add(key)
        data = subgraph[a][b]
        edges.append(
            GraphEdge(source=a, target=b, weight=data["weight"], normalized_weight=data["normalized_weight"])
        )
        for node_id in (a, b):
            if node_id not in nodes:
                nodes[node_id] = style(node_id, subgraph.nodes[node_id]["weight"])
    return Graph(nodes=list(nodes.values()), edges=edges)


def _tag_node(node_id: str, weight: float) -> GraphNode:
    group = tag_prefix(node_id)
    return GraphNode(
        id=node_id,
        label=node_id.split(":")[-1],
        group=group if group else OTHER_NAMESPACE,
        weight=weight,
        size=sqrt(weight or 1) * 0.5 + 4,
    )


def cooccurrence_graph(tag_edges: Sequence[TagEdge], threshold_percent: float = 10.0) -> Graph:
    """
    Build the tag co-occurrence graph.

    Each edge is normalized against the heavier of its two endpoints' total
    incident weight.
    """
    pairs: List[WeightedPair] = [(e.tag_a, e.tag_b, e.weight) for e in tag_edges]
    full = build_weighted_graph(pairs)
    weights = accumulate_node_weights(full)

    normalize_edges(full, lambda a, b: max(weights[a], weights[b]))
    kept = apply_threshold(full, threshold_percent)

    graph = _to_dto(kept, pairs, _tag_node)
    logger.debug(
        f"Tag graph: {len(graph.edges)}/{full.number_of_edges()} edges, {len(graph.nodes)} nodes "
        f"at {threshold_percent}% threshold"
    )
    return graph


def bridge_authors(posts: Iterable[Post], max_authors: int = 20) -> List[Tuple[str, Dict[str, int]]]:
    """
    Authors posting in at least two communities, with their per-community
    post counts, ranked by number of distinct communities.
    """
    per_author: Dict[str, Counter] = {}
    for post in posts:
        per_author.setdefault(post.author_name, Counter())[post.submolt_name] += 1

    bridges = [
        (author, dict(counts))
        for author, counts in per_author.items()
        if len(counts) >= MIN_BRIDGE_SUBMOLTS
    ]
    bridges.sort(key=lambda item: len(item[1]), reverse=True)
    return bridges[:max_authors]


def _author_community_node(node_id: str, weight: float) -> GraphNode:
    if node_id.startswith(AUTHOR_NODE_PREFIX):
        return GraphNode(
            id=node_id, label=node_id[len(AUTHOR_NODE_PREFIX):], group="author",
            weight=weight, size=AUTHOR_NODE_SIZE,
        )
    return GraphNode(
        id=node_id, label=node_id[len(SUBMOLT_NODE_PREFIX):], group="submolt",
        weight=weight, size=SUBMOLT_NODE_SIZE,
    )


def author_community_graph(
    posts: Iterable[Post],
    threshold_percent: float = 10.0,
    max_authors: int = 20,
) -> Graph:
    """
    Build the bipartite bridge-author/community graph over a post subset.

    Node ids are prefixed ``a:`` for authors and ``s:`` for communities.
    Edge weight is the author's post count in that community, normalized
    against the largest such count among the qualifying pairs.
    """
    pairs: List[WeightedPair] = [
        (f"{AUTHOR_NODE_PREFIX}{author}", f"{SUBMOLT_NODE_PREFIX}{submolt}", count)
        for author, counts in bridge_authors(posts, max_authors)
        for submolt, count in counts.items()
    ]
    if not pairs:
        return Graph()

    full = build_weighted_graph(pairs)
    accumulate_node_weights(full)
    max_count = max(weight for _, _, weight in full.edges(data="weight"))

    normalize_edges(full, lambda a, b: max_count)
    kept = apply_threshold(full, threshold_percent)

    graph = _to_dto(kept, pairs, _author_community_node)
    logger.debug(f"Author/submolt graph: {len(graph.edges)} edges, {len(graph.nodes)} nodes")
    return graph
