"""
Models package for moltbook explorer.

This package contains the corpus record models and the Pydantic DTOs
exchanged with callers.
"""

from .records import (
    ClassNote,
    Community,
    CommunityProjection,
    Embedding,
    Post,
    Tag,
    TagEdge,
)
from .dtos import (
    AuthorProfile,
    DuplicateGroup,
    FilterSpec,
    Graph,
    GraphEdge,
    GraphNode,
    HeaderStats,
    HistogramBucket,
    IntegrityReport,
    Outlier,
    PostDetail,
    QualityMetric,
    RankedItem,
    Rect,
    SubmoltProfile,
    TagGroup,
)

__all__ = [
    # Records
    "ClassNote",
    "Community",
    "CommunityProjection",
    "Embedding",
    "Post",
    "Tag",
    "TagEdge",
    # DTOs
    "AuthorProfile",
    "DuplicateGroup",
    "FilterSpec",
    "Graph",
    "GraphEdge",
    "GraphNode",
    "HeaderStats",
    "HistogramBucket",
    "IntegrityReport",
    "Outlier",
    "PostDetail",
    "QualityMetric",
    "RankedItem",
    "Rect",
    "SubmoltProfile",
    "TagGroup",
]
