"""
Pydantic Data Transfer Objects (DTOs) for moltbook explorer.

These models describe the filter specification consumed by every query and
the shapes handed back to the presentation layer.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .records import ClassNote, Community, Post, Tag


class FilterSpec(BaseModel):
    """
    Caller-owned description of the active filter predicates.

    Empty collections, non-positive thresholds, a blank search and a missing
    ``post_ids`` list all mean "predicate inactive".
    """
    submolts: List[str] = Field(default_factory=list)
    authors: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    class_notes: List[str] = Field(default_factory=list)
    min_upvotes: int = Field(default=0, ge=0)
    min_comments: int = Field(default=0, ge=0)
    search: str = ""
    post_ids: Optional[List[str]] = None

    model_config = ConfigDict(frozen=True)

    def is_empty(self) -> bool:
        """Return True when no predicate is active."""
        return not (
            self.submolts
            or self.authors
            or self.tags
            or self.class_notes
            or self.min_upvotes > 0
            or self.min_comments > 0
            or self.search.strip()
            or self.post_ids
        )


class RankedItem(BaseModel):
    """A counted key of a ranking."""
    key: str
    count: int
    label: str


class TagGroup(BaseModel):
    """All tags sharing a namespace prefix, ranked by count."""
    prefix: str
    tags: List[RankedItem]


class HistogramBucket(BaseModel):
    """
    One histogram bucket. ``low``/``high`` are the floored display bounds;
    counting uses the exact bounds.
    """
    low: int
    high: int
    count: int
    label: str


class Rect(BaseModel):
    """
    Axis-aligned rectangle in data space. Corners are normalized so that
    ``x0 <= x1`` and ``y0 <= y1``.
    """
    x0: float
    y0: float
    x1: float
    y1: float

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _order_corners(cls, data: Any) -> Any:
        if isinstance(data, dict) and all(k in data for k in ("x0", "y0", "x1", "y1")):
            data = dict(data)
            data["x0"], data["x1"] = sorted((data["x0"], data["x1"]))
            data["y0"], data["y1"] = sorted((data["y0"], data["y1"]))
        return data

    @classmethod
    def from_corners(cls, x0: float, y0: float, x1: float, y1: float) -> "Rect":
        return cls(x0=x0, y0=y0, x1=x1, y1=y1)

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    def is_degenerate(self) -> bool:
        return self.width == 0 or self.height == 0

    def contains(self, x: float, y: float) -> bool:
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1


class GraphNode(BaseModel):
    """Graph node with the weight and size exposed for rendering."""
    id: str
    label: str
    group: str
    weight: float
    size: float


class GraphEdge(BaseModel):
    """Graph edge carrying both the raw and the normalized weight."""
    source: str
    target: str
    weight: float
    normalized_weight: float


class Graph(BaseModel):
    """Nodes and edges of a relationship graph. No layout is attached."""
    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.edges


class DuplicateGroup(BaseModel):
    """Posts sharing the same normalized title."""
    title: str
    count: int
    posts: List[Post]


class Outlier(BaseModel):
    """A post flagged by one of the extremal-value scans."""
    kind: str
    post: Post
    value: int


class QualityMetric(BaseModel):
    """A data-quality figure with its traffic-light status."""
    name: str
    value: int
    percent: Optional[float] = None
    status: str = "good"


class IntegrityReport(BaseModel):
    """Whole-corpus integrity assessment."""
    metrics: List[QualityMetric]
    missing_by_field: Dict[str, int]
    duplicates: List[DuplicateGroup]
    outliers: List[Outlier]


class HeaderStats(BaseModel):
    """Current-subset figures next to the corpus totals."""
    posts: int
    authors: int
    submolts: int
    total_posts: int
    total_authors: int
    total_submolts: int


class SubmoltProfile(BaseModel):
    """Summary of one community."""
    submolt: Community
    post_count: int
    top_authors: List[RankedItem]
    top_tags: List[RankedItem]


class AuthorProfile(BaseModel):
    """Summary of one author's activity."""
    author_name: str
    post_count: int
    total_upvotes: int
    total_downvotes: int
    total_comments: int
    top_submolts: List[RankedItem]
    posts: List[Post]


class PostDetail(BaseModel):
    """A post together with its tags, class notes and nearest neighbours."""
    post: Post
    tags: List[Tag]
    class_notes: List[ClassNote]
    similar: List[Post]
