"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from moltbook_explorer.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr("moltbook_explorer.cli.setup_logging", lambda level=None: None)


def _run(*args):
    return runner.invoke(app, list(args))


class TestCli:
    """Test cases for the moltbook-explorer commands."""

    def test_summary(self, data_dir):
        result = _run("summary", "--data-dir", str(data_dir), "--submolt", "tech")
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["stats"]["posts"] == 2
        assert payload["stats"]["total_posts"] == 4
        assert payload["overview"]["top_authors"][0]["key"] == "bob"

    def test_top_tags(self, data_dir):
        result = _run("top", "tag", "-d", str(data_dir), "-n", "2")
        assert result.exit_code == 0
        assert [i["key"] for i in json.loads(result.stdout)] == ["topic:ai", "mood:happy"]

    def test_top_authors_with_engagement_filter(self, data_dir):
        result = _run("top", "author", "-d", str(data_dir), "--min-upvotes", "10")
        assert result.exit_code == 0
        assert [(i["key"], i["count"]) for i in json.loads(result.stdout)] == [("bob", 1), ("alice", 1)]

    def test_top_unknown_field(self, data_dir):
        assert _run("top", "color", "-d", str(data_dir)).exit_code == 2

    def test_similar(self, data_dir):
        result = _run("similar", "p1", "-k", "1", "-d", str(data_dir))
        assert result.exit_code == 0
        assert [p["post_id"] for p in json.loads(result.stdout)] == ["p2"]

    def test_similar_default_limit_excludes_anchor(self, data_dir):
        result = _run("similar", "p3", "-d", str(data_dir))
        assert [p["post_id"] for p in json.loads(result.stdout)] == ["p2", "p1"]

    def test_rect(self, data_dir):
        result = _run("rect", "0", "0", "1", "1", "-d", str(data_dir))
        assert result.exit_code == 0
        assert json.loads(result.stdout) == ["p1", "p2"]

    def test_rect_submolts(self, data_dir):
        result = _run("rect", "5", "5", "20", "20", "--kind", "submolts", "-d", str(data_dir))
        assert json.loads(result.stdout) == ["tech"]

    def test_graph_tags(self, data_dir):
        result = _run("graph", "-d", str(data_dir), "--threshold", "20")
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)["edges"]) == 2

    def test_graph_authors(self, data_dir):
        result = _run("graph", "--kind", "authors", "-d", str(data_dir))
        assert result.exit_code == 0
        assert {n["id"] for n in json.loads(result.stdout)["nodes"]} == {"a:alice", "s:general", "s:tech"}

    def test_integrity(self, data_dir):
        result = _run("integrity", "-d", str(data_dir))
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["duplicates"][0]["count"] == 2
        assert [o["kind"] for o in report["outliers"]] == ["High Upvotes", "High Upvotes", "Long Content"]

    def test_missing_corpus_exits_with_error(self, tmp_path):
        result = _run("summary", "-d", str(tmp_path))
        assert result.exit_code == 1

    def test_undecodable_corpus_exits_with_error(self, data_dir):
        (data_dir / "posts.json").write_bytes(b'[{"post_id": "\xff\xfe"}]')
        result = _run("integrity", "-d", str(data_dir))
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
