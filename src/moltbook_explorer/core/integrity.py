"""
Duplicate & Outlier Detector component for moltbook explorer.

Both scans are meant for the whole corpus rather than the active filter, but
accept any post subset.
"""

from typing import Dict, Iterable, List, Sequence

from ..models import DuplicateGroup, Outlier, Post

# Fixed thresholds. Candidates for configuration once there is a need.
MIN_DUPLICATE_TITLE_LENGTH = 10
MAX_DUPLICATE_GROUPS = 20
HIGH_UPVOTES_SCAN = 10
HIGH_UPVOTES_THRESHOLD = 10
LONG_CONTENT_SCAN = 5
LONG_CONTENT_THRESHOLD = 5000

HIGH_UPVOTES = "High Upvotes"
LONG_CONTENT = "Long Content"


def normalize_title(title: str) -> str:
    return title.strip().casefold()


def find_duplicates(posts: Iterable[Post]) -> List[DuplicateGroup]:
    """
    Group posts by normalized title.

    Titles shorter than ``MIN_DUPLICATE_TITLE_LENGTH`` after normalization
    are ignored, single-member groups dropped, and at most
    ``MAX_DUPLICATE_GROUPS`` groups returned, largest first.
    """
    groups: Dict[str, List[Post]] = {}
    for post in posts:
        key = normalize_title(post.title)
        if len(key) < MIN_DUPLICATE_TITLE_LENGTH:
            continue
        groups.setdefault(key, []).append(post)

    duplicates = [
        DuplicateGroup(title=title, count=len(members), posts=members)
        for title, members in groups.items()
        if len(members) > 1
    ]
    duplicates.sort(key=lambda g: g.count, reverse=True)
    return duplicates[:MAX_DUPLICATE_GROUPS]


def find_outliers(posts: Sequence[Post]) -> List[Outlier]:
    """
    Flag the most upvoted and the longest posts.

    The top ``HIGH_UPVOTES_SCAN`` posts by upvotes are kept when above
    ``HIGH_UPVOTES_THRESHOLD``; the top ``LONG_CONTENT_SCAN`` posts by content
    length when above ``LONG_CONTENT_THRESHOLD``.
    """
    outliers: List[Outlier] = []

    by_upvotes = sorted(posts, key=lambda p: p.upvotes, reverse=True)
    for post in by_upvotes[:HIGH_UPVOTES_SCAN]:
        if post.upvotes > HIGH_UPVOTES_THRESHOLD:
            outliers.append(Outlier(kind=HIGH_UPVOTES, post=post, value=post.upvotes))

    by_length = sorted(posts, key=lambda p: p.content_len, reverse=True)
    for post in by_length[:LONG_CONTENT_SCAN]:
        if post.content_len > LONG_CONTENT_THRESHOLD:
            outliers.append(Outlier(kind=LONG_CONTENT, post=post, value=post.content_len))

    return outliers
