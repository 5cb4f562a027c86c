"""
Filter Engine component for moltbook explorer.

Evaluates a ``FilterSpec`` as a conjunction of independently optional
predicates. Membership predicates over multi-valued groups (tags, class
notes) match when any value is selected.
"""

from typing import Callable, Iterable, List, Optional

from loguru import logger

from ..models import FilterSpec, Post
from .index import CorpusIndex

Predicate = Callable[[Post], bool]


def build_predicates(index: CorpusIndex, spec: FilterSpec) -> List[Predicate]:
    """
    Translate the active parts of ``spec`` into post predicates.

    Inactive predicates are omitted, so an empty specification yields an
    empty list.
    """
    predicates: List[Predicate] = []

    if spec.submolts:
        submolts = set(spec.submolts)
        predicates.append(lambda p: p.submolt_name in submolts)

    if spec.authors:
        authors = set(spec.authors)
        predicates.append(lambda p: p.author_name in authors)

    if spec.tags:
        tags = set(spec.tags)
        predicates.append(lambda p: any(t.tag in tags for t in index.tags_for(p.post_id)))

    if spec.class_notes:
        notes = set(spec.class_notes)
        predicates.append(
            lambda p: any(n.class_note in notes for n in index.class_notes_for(p.post_id))
        )

    if spec.min_upvotes > 0:
        min_upvotes = spec.min_upvotes
        predicates.append(lambda p: p.upvotes >= min_upvotes)

    if spec.min_comments > 0:
        min_comments = spec.min_comments
        predicates.append(lambda p: p.comment_count >= min_comments)

    if spec.search.strip():
        query = spec.search.lower()
        predicates.append(
            lambda p: query in p.title.lower()
            or query in p.content.lower()
            or query in p.author_name.lower()
        )

    if spec.post_ids:
        post_ids = set(spec.post_ids)
        predicates.append(lambda p: p.post_id in post_ids)

    return predicates


def filter_posts(
    index: CorpusIndex,
    spec: FilterSpec,
    posts: Optional[Iterable[Post]] = None,
) -> List[Post]:
    """
    Return the posts matching every active predicate of ``spec``.

    Args:
        index: Corpus index used for tag and class-note lookups
        spec: Filter specification
        posts: Subset to filter; defaults to the whole corpus

    Returns:
        Matching posts in their input order. An unsatisfiable specification
        yields an empty list.
    """
    source = index.posts if posts is None else posts
    predicates = build_predicates(index, spec)
    if not predicates:
        return list(source)

    result = [p for p in source if all(pred(p) for pred in predicates)]
    logger.debug(f"Filter matched {len(result)} posts with {len(predicates)} active predicates")
    return result
