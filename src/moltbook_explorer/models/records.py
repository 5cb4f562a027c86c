"""
Pydantic models for the corpus records.

Every entity is loaded once, in bulk, and never mutated afterwards, so all
models are frozen. Optional text fields accept ``null`` and normalize to an
empty string; optional counters accept ``null`` and normalize to zero. A value
of the wrong kind (e.g. ``"many"`` for ``upvotes``) still fails validation.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Record(BaseModel):
    """Shared configuration for corpus records."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)


def _none_to_empty(value: Any) -> Any:
    return "" if value is None else value


def _none_to_zero(value: Any) -> Any:
    return 0 if value is None else value


class Post(_Record):
    """A single post of the corpus."""
    post_id: str
    title: str = ""
    content: str = ""
    content_len: int = 0
    author_id: Optional[str] = None
    author_name: str = ""
    submolt_name: str = ""
    submolt_display_name: str = ""
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    created_at: str = ""
    is_empty_title: bool = False

    @field_validator(
        "title", "content", "author_name", "submolt_name",
        "submolt_display_name", "created_at", mode="before",
    )
    @classmethod
    def _text_or_empty(cls, v: Any) -> Any:
        return _none_to_empty(v)

    @field_validator("content_len", "upvotes", "downvotes", "comment_count", mode="before")
    @classmethod
    def _count_or_zero(cls, v: Any) -> Any:
        return _none_to_zero(v)

    @field_validator("is_empty_title", mode="before")
    @classmethod
    def _flag_or_false(cls, v: Any) -> Any:
        return False if v is None else v


class Community(_Record):
    """A community (``submolt``) posts are published in."""
    submolt_name: str
    display_name: str = ""
    description: str = ""
    subscriber_count: int = 0

    @field_validator("display_name", "description", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> Any:
        return _none_to_empty(v)

    @field_validator("subscriber_count", mode="before")
    @classmethod
    def _count_or_zero(cls, v: Any) -> Any:
        return _none_to_zero(v)


class Tag(_Record):
    """A tag attached to a post, optionally namespaced as ``namespace:value``."""
    post_id: str
    tag: str
    tag_namespace: str = ""

    @field_validator("tag_namespace", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> Any:
        return _none_to_empty(v)


class ClassNote(_Record):
    """A classification label attached to a post."""
    post_id: str
    class_note: str


class TagEdge(_Record):
    """Precomputed co-occurrence count of an unordered tag pair."""
    tag_a: str
    tag_b: str
    weight: int = Field(default=0, ge=0)


class Embedding(_Record):
    """2-D projection of a post."""
    post_id: str
    x: float
    y: float

    @property
    def point_id(self) -> str:
        return self.post_id


class CommunityProjection(_Record):
    """2-D projection of a community."""
    submolt_name: str
    x: float
    y: float

    @property
    def point_id(self) -> str:
        return self.submolt_name
