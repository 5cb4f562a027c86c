"""
Core components for moltbook explorer.

Everything here is a read-only function of a ``CorpusIndex`` (and optionally
an already filtered post subset).
"""

from .index import CorpusIndex
from .filters import filter_posts
from .aggregation import (
    community_post_counts,
    grouped_tags,
    histogram,
    sort_posts,
    top_class_notes,
    top_items,
    top_tags,
)
from .similarity import nearest
from .spatial import points_in_rect, posts_in_rect, submolts_in_rect
from .graphs import author_community_graph, cooccurrence_graph
from .integrity import find_duplicates, find_outliers

__all__ = [
    "CorpusIndex",
    "filter_posts",
    "community_post_counts",
    "grouped_tags",
    "histogram",
    "sort_posts",
    "top_class_notes",
    "top_items",
    "top_tags",
    "nearest",
    "points_in_rect",
    "posts_in_rect",
    "submolts_in_rect",
    "author_community_graph",
    "cooccurrence_graph",
    "find_duplicates",
    "find_outliers",
]
