"""
Aggregation & Ranking component for moltbook explorer.

Rankings count in first-encountered order and then sort by count with a
stable sort, so ties keep the order in which keys were first seen.
"""

from bisect import bisect_right
from collections import Counter
from math import floor
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from ..models import HistogramBucket, Post, RankedItem, TagGroup
from .index import CorpusIndex

KeyFn = Union[str, Callable[[Post], str]]

NUMERIC_SORT_FIELDS = ("upvotes", "downvotes", "comment_count", "content_len")
CHRONOLOGICAL_SORT_FIELD = "created_at"
OTHER_NAMESPACE = "other"


def _accessor(key: KeyFn) -> Callable[[Post], str]:
    if callable(key):
        return key
    return lambda post: getattr(post, key)


def _rank(counts: Counter, limit: Optional[int], labels: Optional[Dict[str, str]] = None) -> List[RankedItem]:
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    labels = labels or {}
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ordered = ordered[:limit]
    return [
        RankedItem(key=key, count=count, label=labels.get(key) or key)
        for key, count in ordered
    ]


def top_items(
    posts: Iterable[Post],
    key_fn: KeyFn,
    limit: Optional[int] = 10,
    label_fn: Optional[KeyFn] = None,
) -> List[RankedItem]:
    """
    Rank the distinct values of ``key_fn`` across ``posts``.

    Args:
        posts: Posts to count over
        key_fn: Callable or Post attribute name producing the key
        limit: Maximum number of entries; ``None`` keeps all
        label_fn: Optional callable or attribute name producing a display
            label; the last non-empty label seen for a key wins

    Returns:
        Entries sorted by count descending, ties in first-encountered order
    """
    key_of = _accessor(key_fn)
    label_of = _accessor(label_fn) if label_fn is not None else None

    counts: Counter = Counter()
    labels: Dict[str, str] = {}
    for post in posts:
        key = key_of(post)
        counts[key] += 1
        if label_of is not None:
            label = label_of(post)
            if label:
                labels[key] = label

    return _rank(counts, limit, labels)


def top_tags(index: CorpusIndex, posts: Iterable[Post], limit: Optional[int] = 10) -> List[RankedItem]:
    """Rank tags over ``posts``; a post contributes once per attached tag."""
    counts: Counter = Counter()
    for post in posts:
        for tag in index.tags_for(post.post_id):
            counts[tag.tag] += 1
    return _rank(counts, limit)


def top_class_notes(
    index: CorpusIndex, posts: Iterable[Post], limit: Optional[int] = 10
) -> List[RankedItem]:
    """Rank class notes over ``posts``; a post contributes once per note."""
    counts: Counter = Counter()
    for post in posts:
        for note in index.class_notes_for(post.post_id):
            counts[note.class_note] += 1
    return _rank(counts, limit)


def tag_prefix(tag: str) -> str:
    """Namespace prefix of a tag: text before the first ``:``, else ``other``."""
    prefix, sep, _ = tag.partition(":")
    return prefix if sep else OTHER_NAMESPACE


def grouped_tags(index: CorpusIndex) -> List[TagGroup]:
    """
    Partition every tag of the corpus by namespace prefix.

    Buckets are ordered by prefix; tags inside a bucket by count descending.
    """
    groups: Dict[str, Counter] = {}
    for tag in index.post_tags:
        groups.setdefault(tag_prefix(tag.tag), Counter())[tag.tag] += 1

    return [
        TagGroup(prefix=prefix, tags=_rank(groups[prefix], None))
        for prefix in sorted(groups)
    ]


def histogram(posts: Sequence[Post], field: str, bins: int = 10) -> List[HistogramBucket]:
    """
    Bucket a numeric post field into ``bins`` equal-width buckets.

    Buckets are half-open ``[lo, hi)`` except the last, which is closed, so
    every value lands in exactly one bucket. A constant field produces one
    bucket of width 1. An empty input produces no buckets.

    Raises:
        ValueError: If ``bins`` is smaller than 1
    """
    if bins < 1:
        raise ValueError(f"bins must be at least 1, got {bins}")
    values = [getattr(p, field) for p in posts]
    if not values:
        return []

    low, high = min(values), max(values)
    if low == high:
        return [HistogramBucket(low=floor(low), high=floor(low) + 1, count=len(values), label=f"{floor(low)}")]

    width = (high - low) / bins
    # edges[bins] is pinned to the maximum so rounding cannot leave it uncovered
    edges = [low + i * width for i in range(bins)] + [high]
    counts = [0] * bins
    for value in values:
        counts[min(bisect_right(edges, value) - 1, bins - 1)] += 1

    buckets = []
    for i, count in enumerate(counts):
        lo, hi = floor(edges[i]), floor(edges[i + 1])
        buckets.append(HistogramBucket(low=lo, high=hi, count=count, label=f"{lo}-{hi}"))
    return buckets


def sort_posts(posts: Iterable[Post], field: str = CHRONOLOGICAL_SORT_FIELD, ascending: bool = False) -> List[Post]:
    """
    Return a stably sorted copy of ``posts``.

    ``created_at`` compares as text (the stored format sorts lexically);
    the counters compare numerically.

    Raises:
        ValueError: If ``field`` is not a sortable field
    """
    if field != CHRONOLOGICAL_SORT_FIELD and field not in NUMERIC_SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {field}")
    return sorted(posts, key=lambda p: getattr(p, field), reverse=not ascending)


def community_post_counts(posts: Iterable[Post]) -> Dict[str, int]:
    """Number of posts per community, used to size projection points."""
    return dict(Counter(p.submolt_name for p in posts))
