"""
Spatial Range Query component for moltbook explorer.

Rectangles arrive already expressed in data space; any pan/zoom transform is
undone by the caller before querying.
"""

from typing import Iterable, Set, Union

from ..models import CommunityProjection, Embedding, Rect
from .index import CorpusIndex

Point = Union[Embedding, CommunityProjection]


def points_in_rect(points: Iterable[Point], rect: Rect) -> Set[str]:
    """
    Ids of the points inside ``rect``, edges inclusive.

    A rectangle with zero width or height selects nothing.
    """
    if rect.is_degenerate():
        return set()
    return {p.point_id for p in points if rect.contains(p.x, p.y)}


def posts_in_rect(index: CorpusIndex, rect: Rect) -> Set[str]:
    """Post ids whose embedding falls inside ``rect``."""
    return points_in_rect(index.post_embeddings, rect)


def submolts_in_rect(index: CorpusIndex, rect: Rect) -> Set[str]:
    """Community names whose projection falls inside ``rect``."""
    return points_in_rect(index.submolt_umap, rect)
