"""
Explorer service for moltbook explorer.

This module composes the core components into the operations every
exploration mode reuses: filtered listings, overview aggregates, profiles,
similarity and rectangle selections, networks and the integrity report.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd
from loguru import logger

from ..config import Settings, get_settings
from ..core import (
    CorpusIndex,
    author_community_graph,
    community_post_counts,
    cooccurrence_graph,
    filter_posts,
    find_duplicates,
    find_outliers,
    grouped_tags,
    histogram,
    nearest,
    posts_in_rect,
    sort_posts,
    submolts_in_rect,
    top_class_notes,
    top_items,
    top_tags,
)
from ..models import (
    AuthorProfile,
    FilterSpec,
    Graph,
    HeaderStats,
    IntegrityReport,
    Post,
    PostDetail,
    QualityMetric,
    Rect,
    SubmoltProfile,
)

PROFILE_TOP_AUTHORS = 5
PROFILE_TOP_TAGS = 8
PROFILE_TOP_SUBMOLTS = 5
POST_DETAIL_SIMILAR = 5
FILTER_LIST_SUBMOLTS = 20
FILTER_LIST_CLASS_NOTES = 15
QUALITY_GOOD_RATIO = 0.05
QUALITY_WARNING_RATIO = 0.2
MISSINGNESS_FIELDS = ("title", "content", "created_at")


def _quality_status(ratio: float) -> str:
    if ratio < QUALITY_GOOD_RATIO:
        return "good"
    if ratio < QUALITY_WARNING_RATIO:
        return "warning"
    return "bad"


def _section(mapping: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = mapping.get(key)
    return value if isinstance(value, Mapping) else {}


def _count(mapping: Mapping[str, Any], key: str, fallback: int) -> int:
    # Schema figures are advisory; anything but a non-negative int falls back.
    value = mapping.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return fallback
    return value


class ExplorerService:
    """
    Read-only operations over one loaded corpus.

    Holds no mutable state besides the index reference; replacing the
    corpus means constructing a new service around a freshly built index.
    """

    def __init__(self, index: CorpusIndex, settings: Optional[Settings] = None):
        """
        Initialize the explorer service.

        Args:
            index: Built corpus index
            settings: Settings instance; defaults to the cached settings
        """
        self.index = index
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def filter(self, spec: FilterSpec) -> List[Post]:
        return filter_posts(self.index, spec)

    def results(
        self,
        spec: FilterSpec,
        sort_field: str = "created_at",
        ascending: bool = False,
    ) -> List[Post]:
        """Filtered posts, sorted and capped at ``results_page_size``."""
        posts = self.filter(spec)
        return sort_posts(posts, sort_field, ascending)[: self.settings.results_page_size]

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def overview(self, posts: Sequence[Post]) -> Dict[str, Any]:
        """
        Histograms and rankings shown on the overview.

        Args:
            posts: Current (filtered) post subset

        Returns:
            Dictionary of histograms and ranked lists
        """
        limit = self.settings.top_items_limit
        bins = self.settings.histogram_bins
        return {
            "upvotes_histogram": histogram(posts, "upvotes", bins),
            "comments_histogram": histogram(posts, "comment_count", bins),
            "top_submolts": top_items(posts, "submolt_name", limit, "submolt_display_name"),
            "top_authors": top_items(posts, "author_name", limit),
            "top_tags": top_tags(self.index, posts, limit),
            "top_class_notes": top_class_notes(self.index, posts, limit),
        }

    def header_stats(self, posts: Sequence[Post]) -> HeaderStats:
        """
        Current subset figures next to corpus totals.

        Totals come from ``schema.json`` when it carries them.
        """
        schema = self.index.schema
        stats = _section(schema, "stats")
        posts_table = _section(_section(schema, "tables"), "posts")

        return HeaderStats(
            posts=len(posts),
            authors=len({p.author_name for p in posts}),
            submolts=len({p.submolt_name for p in posts}),
            total_posts=_count(posts_table, "row_count", len(self.index.posts)),
            total_authors=_count(stats, "unique_authors", len(self.index.posts_by_author)),
            total_submolts=_count(stats, "unique_submolts", len(self.index.posts_by_submolt)),
        )

    def filter_lists(self) -> Dict[str, Any]:
        """Selectable values for the filter sidebar, counted over the full corpus."""
        posts = self.index.posts
        return {
            "submolts": top_items(posts, "submolt_name", FILTER_LIST_SUBMOLTS),
            "tag_groups": grouped_tags(self.index),
            "class_notes": top_class_notes(self.index, posts, FILTER_LIST_CLASS_NOTES),
        }

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def submolt_profile(self, name: str) -> Optional[SubmoltProfile]:
        submolt = self.index.submolt_by_name.get(name)
        if submolt is None:
            return None
        posts = self.index.posts_by_submolt.get(name, ())
        return SubmoltProfile(
            submolt=submolt,
            post_count=len(posts),
            top_authors=top_items(posts, "author_name", PROFILE_TOP_AUTHORS),
            top_tags=top_tags(self.index, posts, PROFILE_TOP_TAGS),
        )

    def author_profile(self, name: str) -> Optional[AuthorProfile]:
        posts = self.index.posts_by_author.get(name, ())
        if not posts:
            return None
        return AuthorProfile(
            author_name=name,
            post_count=len(posts),
            total_upvotes=sum(p.upvotes for p in posts),
            total_downvotes=sum(p.downvotes for p in posts),
            total_comments=sum(p.comment_count for p in posts),
            top_submolts=top_items(posts, "submolt_name", PROFILE_TOP_SUBMOLTS, "submolt_display_name"),
            posts=list(posts),
        )

    def post_detail(self, post_id: str) -> Optional[PostDetail]:
        post = self.index.post_by_id.get(post_id)
        if post is None:
            return None
        return PostDetail(
            post=post,
            tags=list(self.index.tags_for(post_id)),
            class_notes=list(self.index.class_notes_for(post_id)),
            similar=nearest(self.index, post_id, POST_DETAIL_SIMILAR),
        )

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------

    def similar_selection(self, anchor_id: str, k: Optional[int] = None) -> List[str]:
        """
        Ids of the anchor followed by its nearest neighbours, ready to be
        used as a ``post_ids`` allow-list. Empty when the anchor has no
        embedding.
        """
        k = self.settings.similar_posts_limit if k is None else k
        if anchor_id not in self.index.embedding_by_post_id:
            return []
        return [anchor_id] + [p.post_id for p in nearest(self.index, anchor_id, k)]

    def spaces(self, posts: Sequence[Post]) -> Dict[str, Any]:
        """
        Community projection points with post counts for sizing (full
        corpus) and highlighting (current subset).
        """
        return {
            "points": list(self.index.submolt_umap),
            "total_counts": community_post_counts(self.index.posts),
            "filtered_counts": community_post_counts(posts),
        }

    def posts_in_rect(self, rect: Rect) -> List[str]:
        """Selected post ids in corpus order."""
        selected = posts_in_rect(self.index, rect)
        return [e.post_id for e in self.index.post_embeddings if e.post_id in selected]

    def submolts_in_rect(self, rect: Rect) -> List[str]:
        """Selected community names in projection order."""
        selected = submolts_in_rect(self.index, rect)
        return [p.submolt_name for p in self.index.submolt_umap if p.submolt_name in selected]

    # ------------------------------------------------------------------
    # Networks
    # ------------------------------------------------------------------

    def tag_network(self, threshold_percent: Optional[float] = None) -> Graph:
        threshold = self.settings.edge_threshold_percent if threshold_percent is None else threshold_percent
        return cooccurrence_graph(self.index.tag_edges, threshold)

    def author_community_network(
        self, posts: Sequence[Post], threshold_percent: Optional[float] = None
    ) -> Graph:
        threshold = self.settings.edge_threshold_percent if threshold_percent is None else threshold_percent
        return author_community_graph(posts, threshold, self.settings.max_bridge_authors)

    # ------------------------------------------------------------------
    # Integrity
    # ------------------------------------------------------------------

    def calculate_quality_metrics(self, posts: Sequence[Post]) -> Dict[str, Any]:
        """
        Calculate data-quality figures for a post collection.

        Args:
            posts: Posts to assess

        Returns:
            Dictionary with ``metrics`` and ``missing_by_field``
        """
        if not posts:
            return {
                "metrics": [QualityMetric(name="Total Posts", value=0)],
                "missing_by_field": {field: 0 for field in MISSINGNESS_FIELDS},
            }

        df = pd.DataFrame([p.model_dump() for p in posts])
        total = len(df)

        blank = {
            field: df[field].fillna("").astype(str).str.strip().eq("")
            for field in MISSINGNESS_FIELDS
        }
        missing_content = int(blank["content"].sum())
        empty_titles = int(df["is_empty_title"].fillna(False).astype(bool).sum())

        metrics = [QualityMetric(name="Total Posts", value=total)]
        for name, count in (("Missing Content", missing_content), ("Empty Titles", empty_titles)):
            ratio = count / total
            metrics.append(
                QualityMetric(name=name, value=count, percent=round(ratio * 100, 1), status=_quality_status(ratio))
            )
        metrics.append(QualityMetric(name="Unique Authors", value=int(df["author_id"].nunique())))
        metrics.append(QualityMetric(name="Unique Submolts", value=int(df["submolt_name"].nunique())))

        return {
            "metrics": metrics,
            "missing_by_field": {field: int(mask.sum()) for field, mask in blank.items()},
        }

    def integrity_report(self) -> IntegrityReport:
        """Quality metrics, duplicates and outliers over the whole corpus."""
        posts = self.index.posts
        quality = self.calculate_quality_metrics(posts)
        duplicates = find_duplicates(posts)
        outliers = find_outliers(posts)
        logger.info(
            f"Integrity report: {len(duplicates)} duplicate groups, {len(outliers)} outliers "
            f"over {len(posts)} posts"
        )
        return IntegrityReport(
            metrics=quality["metrics"],
            missing_by_field=quality["missing_by_field"],
            duplicates=duplicates,
            outliers=outliers,
        )
