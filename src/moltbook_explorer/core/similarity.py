"""
Similarity Search component for moltbook explorer.

Nearest-neighbour lookup over the per-post 2-D embedding. The scan is linear
in the number of embedded posts; a grid or k-d tree can replace it behind the
same ``nearest`` contract if the corpus grows.
"""

from math import hypot
from typing import List, Tuple

from loguru import logger

from ..models import Post
from .index import CorpusIndex


def nearest(index: CorpusIndex, anchor_id: str, k: int = 10) -> List[Post]:
    """
    Return up to ``k`` posts closest to the anchor in embedding space.

    Args:
        index: Corpus index
        anchor_id: Post id whose neighbours are requested
        k: Maximum number of neighbours

    Returns:
        Posts ordered by non-decreasing Euclidean distance, never including
        the anchor. Empty when the anchor has no embedding.
    """
    anchor = index.embedding_by_post_id.get(anchor_id)
    if anchor is None or k <= 0:
        return []

    distances: List[Tuple[float, str]] = [
        (hypot(emb.x - anchor.x, emb.y - anchor.y), post_id)
        for post_id, emb in index.embedding_by_post_id.items()
        if post_id != anchor_id
    ]
    distances.sort(key=lambda item: item[0])

    result = [
        index.post_by_id[post_id]
        for _, post_id in distances[:k]
        if post_id in index.post_by_id
    ]
    logger.debug(f"Found {len(result)} neighbours for post {anchor_id}")
    return result
