"""Tests for the filter engine."""

from moltbook_explorer.core import CorpusIndex, filter_posts
from moltbook_explorer.models import FilterSpec


def _ids(posts):
    return [p.post_id for p in posts]


class TestFilterPosts:
    """Test cases for filter_posts."""

    def test_empty_spec_returns_whole_corpus_in_order(self, index):
        assert _ids(filter_posts(index, FilterSpec())) == ["p1", "p2", "p3", "p4"]

    def test_submolt_membership(self, index):
        assert _ids(filter_posts(index, FilterSpec(submolts=["tech"]))) == ["p2", "p3"]

    def test_author_membership(self, index):
        assert _ids(filter_posts(index, FilterSpec(authors=["alice", "carol"]))) == ["p1", "p3", "p4"]

    def test_tags_match_any_selected(self, index):
        result = filter_posts(index, FilterSpec(tags=["mood:happy", "topic:agents"]))
        assert _ids(result) == ["p1", "p3"]

    def test_class_notes_match_any_selected(self, index):
        assert _ids(filter_posts(index, FilterSpec(class_notes=["opinion"]))) == ["p2", "p3"]

    def test_predicates_combine_with_and(self, index):
        spec = FilterSpec(tags=["topic:ai"], submolts=["tech"], authors=["alice"])
        assert _ids(filter_posts(index, spec)) == ["p3"]

    def test_engagement_thresholds(self, index):
        assert _ids(filter_posts(index, FilterSpec(min_upvotes=10))) == ["p2", "p3"]
        assert _ids(filter_posts(index, FilterSpec(min_comments=5))) == ["p1", "p2"]

    def test_search_is_case_insensitive_over_title_content_author(self, index):
        assert _ids(filter_posts(index, FilterSpec(search="PYTHON"))) == ["p2"]
        assert _ids(filter_posts(index, FilterSpec(search="shell"))) == ["p1", "p2"]
        assert _ids(filter_posts(index, FilterSpec(search="caro"))) == ["p4"]

    def test_blank_search_is_ignored(self, index):
        assert len(filter_posts(index, FilterSpec(search="   "))) == 4

    def test_post_id_allow_list(self, index):
        assert _ids(filter_posts(index, FilterSpec(post_ids=["p3", "p1"]))) == ["p1", "p3"]

    def test_empty_allow_list_is_ignored(self, index):
        assert len(filter_posts(index, FilterSpec(post_ids=[]))) == 4

    def test_contradictory_spec_yields_empty(self, index):
        spec = FilterSpec(submolts=["general"], post_ids=["p2"])
        assert filter_posts(index, spec) == []

    def test_filter_is_idempotent(self, index):
        spec = FilterSpec(tags=["topic:ai"], min_upvotes=6)
        once = filter_posts(index, spec)
        assert filter_posts(index, spec, once) == once

    def test_engagement_example(self):
        index = CorpusIndex.build(posts=[
            {"post_id": "A", "author_name": "a", "submolt_name": "m1", "upvotes": 5, "comment_count": 5},
            {"post_id": "B", "author_name": "b", "submolt_name": "m1", "upvotes": 12, "comment_count": 8},
            {"post_id": "C", "author_name": "c", "submolt_name": "m1", "upvotes": 20, "comment_count": 3},
            {"post_id": "D", "author_name": "d", "submolt_name": "m1", "upvotes": 3, "comment_count": 0},
        ])
        assert _ids(filter_posts(index, FilterSpec(min_upvotes=10))) == ["B", "C"]

    def test_is_empty(self):
        assert FilterSpec().is_empty()
        assert FilterSpec(search="  ").is_empty()
        assert not FilterSpec(min_comments=1).is_empty()
