"""
Corpus Index component for moltbook explorer.

This component turns the seven flat record sequences into lookup and
grouping structures. The index is built once per load and never patched
afterwards; a reload builds a fresh index that callers swap in atomically.
"""

from collections.abc import Mapping as MappingABC
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from ..exceptions import CorpusLoadError
from ..models import (
    ClassNote,
    Community,
    CommunityProjection,
    Embedding,
    Post,
    Tag,
    TagEdge,
)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _validate_records(
    records: Any, model: Type[RecordT], source: str
) -> Tuple[RecordT, ...]:
    """
    Validate a raw record sequence into a tuple of frozen models.

    Raises:
        CorpusLoadError: If ``records`` is not a sequence or a record does
            not match ``model``.
    """
    if records is None:
        return ()
    if isinstance(records, (str, bytes, MappingABC)) or not isinstance(records, Iterable):
        raise CorpusLoadError(
            f"expected a sequence of records, got {type(records).__name__}", source=source
        )

    validated: List[RecordT] = []
    for position, record in enumerate(records):
        if isinstance(record, model):
            validated.append(record)
            continue
        try:
            validated.append(model.model_validate(record))
        except ValidationError as e:
            raise CorpusLoadError(f"invalid record at position {position}: {e}", source=source) from e
    return tuple(validated)


def _group(items: Iterable[RecordT], key: str) -> Dict[str, Tuple[RecordT, ...]]:
    groups: Dict[str, List[RecordT]] = {}
    for item in items:
        groups.setdefault(getattr(item, key), []).append(item)
    return {k: tuple(v) for k, v in groups.items()}


def _unique(items: Iterable[RecordT], key: str, source: str) -> Dict[str, RecordT]:
    """
    Map records by a key that must be unique.

    Raises:
        CorpusLoadError: On a repeated key.
    """
    by_key: Dict[str, RecordT] = {}
    for item in items:
        value = getattr(item, key)
        if value in by_key:
            raise CorpusLoadError(f"duplicate {key} {value!r}", source=source)
        by_key[value] = item
    return by_key


class CorpusIndex:
    """
    Immutable, fully materialized view of one corpus.

    Record sequences are exposed as tuples and every derived structure as a
    read-only mapping, so concurrent readers need no locking.
    """

    def __init__(
        self,
        posts: Sequence[Post] = (),
        submolts: Sequence[Community] = (),
        post_tags: Sequence[Tag] = (),
        post_class_notes: Sequence[ClassNote] = (),
        tag_edges: Sequence[TagEdge] = (),
        submolt_umap: Sequence[CommunityProjection] = (),
        post_embeddings: Sequence[Embedding] = (),
        schema: Optional[Mapping[str, Any]] = None,
    ):
        self.posts: Tuple[Post, ...] = tuple(posts)
        self.submolts: Tuple[Community, ...] = tuple(submolts)
        self.post_tags: Tuple[Tag, ...] = tuple(post_tags)
        self.post_class_notes: Tuple[ClassNote, ...] = tuple(post_class_notes)
        self.tag_edges: Tuple[TagEdge, ...] = tuple(tag_edges)
        self.submolt_umap: Tuple[CommunityProjection, ...] = tuple(submolt_umap)
        self.post_embeddings: Tuple[Embedding, ...] = tuple(post_embeddings)
        self.schema: Mapping[str, Any] = MappingProxyType(dict(schema or {}))

        self.post_by_id: Mapping[str, Post] = MappingProxyType(_unique(self.posts, "post_id", "posts"))
        self.submolt_by_name: Mapping[str, Community] = MappingProxyType(
            _unique(self.submolts, "submolt_name", "submolts")
        )
        self.tags_by_post_id: Mapping[str, Tuple[Tag, ...]] = MappingProxyType(
            _group(self.post_tags, "post_id")
        )
        self.class_notes_by_post_id: Mapping[str, Tuple[ClassNote, ...]] = MappingProxyType(
            _group(self.post_class_notes, "post_id")
        )
        self.embedding_by_post_id: Mapping[str, Embedding] = MappingProxyType(
            _unique(self.post_embeddings, "post_id", "post_embeddings")
        )
        self.posts_by_submolt: Mapping[str, Tuple[Post, ...]] = MappingProxyType(
            _group(self.posts, "submolt_name")
        )
        self.posts_by_author: Mapping[str, Tuple[Post, ...]] = MappingProxyType(
            _group(self.posts, "author_name")
        )

        logger.debug(
            f"Built corpus index: {len(self.posts)} posts, {len(self.submolts)} submolts, "
            f"{len(self.post_tags)} tags, {len(self.post_embeddings)} embeddings"
        )

    @classmethod
    def build(
        cls,
        posts: Any = (),
        submolts: Any = (),
        post_tags: Any = (),
        post_class_notes: Any = (),
        tag_edges: Any = (),
        submolt_umap: Any = (),
        post_embeddings: Any = (),
        schema: Optional[Mapping[str, Any]] = None,
    ) -> "CorpusIndex":
        """
        Validate raw record sequences (dicts or models) and build the index.

        Raises:
            CorpusLoadError: On any structural violation of the data model.
        """
        return cls(
            posts=_validate_records(posts, Post, "posts"),
            submolts=_validate_records(submolts, Community, "submolts"),
            post_tags=_validate_records(post_tags, Tag, "post_tags"),
            post_class_notes=_validate_records(post_class_notes, ClassNote, "post_class_notes"),
            tag_edges=_validate_records(tag_edges, TagEdge, "tag_edges"),
            submolt_umap=_validate_records(submolt_umap, CommunityProjection, "submolt_umap"),
            post_embeddings=_validate_records(post_embeddings, Embedding, "post_embeddings"),
            schema=schema,
        )

    def tags_for(self, post_id: str) -> Tuple[Tag, ...]:
        return self.tags_by_post_id.get(post_id, ())

    def class_notes_for(self, post_id: str) -> Tuple[ClassNote, ...]:
        return self.class_notes_by_post_id.get(post_id, ())

    def __len__(self) -> int:
        return len(self.posts)

    def __repr__(self) -> str:
        return f"CorpusIndex(posts={len(self.posts)}, submolts={len(self.submolts)})"
