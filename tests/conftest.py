"""Shared fixtures: a small in-memory corpus built from raw records."""

import json

import pytest

from moltbook_explorer.config import Settings
from moltbook_explorer.core import CorpusIndex

POSTS = [
    {
        "post_id": "p1", "title": "Hello world from the shell", "content": "First post about AI",
        "content_len": 19, "author_id": "u1", "author_name": "alice", "submolt_name": "general",
        "submolt_display_name": "General", "upvotes": 5, "downvotes": 1, "comment_count": 5,
        "created_at": "2024-01-01T10:00:00", "is_empty_title": False,
    },
    {
        "post_id": "p2", "title": "  hello WORLD from the shell ", "content": "Rust vs Python",
        "content_len": 6000, "author_id": "u2", "author_name": "bob", "submolt_name": "tech",
        "submolt_display_name": "Tech", "upvotes": 12, "downvotes": 0, "comment_count": 8,
        "created_at": "2024-01-02T09:00:00", "is_empty_title": False,
    },
    {
        "post_id": "p3", "title": "Short", "content": "Deep dive into agents",
        "content_len": 21, "author_id": "u1", "author_name": "alice", "submolt_name": "tech",
        "submolt_display_name": "Tech", "upvotes": 20, "downvotes": 2, "comment_count": 3,
        "created_at": "2024-01-03T08:30:00", "is_empty_title": False,
    },
    {
        "post_id": "p4", "title": None, "content": "",
        "content_len": 0, "author_id": "u3", "author_name": "carol", "submolt_name": "general",
        "submolt_display_name": "General", "upvotes": 3, "downvotes": 0, "comment_count": 0,
        "created_at": "2023-12-31T23:59:59", "is_empty_title": True,
    },
]

SUBMOLTS = [
    {"submolt_name": "general", "display_name": "General", "description": "Anything goes", "subscriber_count": 100},
    {"submolt_name": "tech", "display_name": "Tech", "description": None, "subscriber_count": 42},
]

POST_TAGS = [
    {"post_id": "p1", "tag": "topic:ai", "tag_namespace": "topic"},
    {"post_id": "p1", "tag": "mood:happy", "tag_namespace": "mood"},
    {"post_id": "p2", "tag": "topic:ai", "tag_namespace": "topic"},
    {"post_id": "p2", "tag": "lang", "tag_namespace": None},
    {"post_id": "p3", "tag": "topic:agents", "tag_namespace": "topic"},
    {"post_id": "p3", "tag": "topic:ai", "tag_namespace": "topic"},
]

POST_CLASS_NOTES = [
    {"post_id": "p1", "class_note": "question"},
    {"post_id": "p2", "class_note": "opinion"},
    {"post_id": "p3", "class_note": "opinion"},
]

TAG_EDGES = [
    {"tag_a": "topic:ai", "tag_b": "mood:happy", "weight": 2},
    {"tag_a": "topic:ai", "tag_b": "topic:agents", "weight": 6},
    {"tag_a": "topic:agents", "tag_b": "lang", "weight": 1},
    {"tag_a": "orphan:a", "tag_b": "orphan:b", "weight": 0},
]

SUBMOLT_UMAP = [
    {"submolt_name": "general", "x": 0.0, "y": 0.0},
    {"submolt_name": "tech", "x": 10.0, "y": 10.0},
]

POST_EMBEDDINGS = [
    {"post_id": "p1", "x": 0.0, "y": 0.0},
    {"post_id": "p2", "x": 1.0, "y": 0.0},
    {"post_id": "p3", "x": 5.0, "y": 5.0},
]

RECORD_SETS = {
    "posts": POSTS,
    "submolts": SUBMOLTS,
    "post_tags": POST_TAGS,
    "post_class_notes": POST_CLASS_NOTES,
    "tag_edges": TAG_EDGES,
    "submolt_umap": SUBMOLT_UMAP,
    "post_embeddings": POST_EMBEDDINGS,
}


@pytest.fixture
def records():
    """Raw record sequences, as a loader would hand them over."""
    return {name: [dict(r) for r in rows] for name, rows in RECORD_SETS.items()}


@pytest.fixture
def index(records):
    """Corpus index over the sample records."""
    return CorpusIndex.build(**records)


@pytest.fixture
def settings():
    """Settings that never touch the environment or a log file."""
    return Settings(_env_file=None, debug_mode=True)


@pytest.fixture
def data_dir(tmp_path, records):
    """Directory holding the sample records as JSON files."""
    for name, rows in records.items():
        (tmp_path / f"{name}.json").write_text(json.dumps(rows), encoding="utf-8")
    return tmp_path
