"""Command-line interface for moltbook explorer."""

import json
import sys
from typing import Any, List, Optional

import typer
from loguru import logger
from pydantic import BaseModel
from typing_extensions import Annotated

from .core import CorpusIndex, nearest, top_class_notes, top_items, top_tags
from .exceptions import CorpusLoadError
from .models import FilterSpec, Rect
from .services import ExplorerService, load_corpus
from .utils import setup_logging

app = typer.Typer(help="Moltbook Explorer - query a static social-platform corpus")

DataDirOption = Annotated[Optional[str], typer.Option("--data-dir", "-d", help="Directory holding the JSON record files")]
LogLevelOption = Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")]
SubmoltOption = Annotated[Optional[List[str]], typer.Option("--submolt", help="Restrict to a community (repeatable)")]
AuthorOption = Annotated[Optional[List[str]], typer.Option("--author", help="Restrict to an author (repeatable)")]
TagOption = Annotated[Optional[List[str]], typer.Option("--tag", help="Restrict to a tag (repeatable)")]
NoteOption = Annotated[Optional[List[str]], typer.Option("--note", help="Restrict to a class note (repeatable)")]
MinUpvotesOption = Annotated[int, typer.Option("--min-upvotes", min=0, help="Minimum upvotes")]
MinCommentsOption = Annotated[int, typer.Option("--min-comments", min=0, help="Minimum comments")]
SearchOption = Annotated[str, typer.Option("--search", "-q", help="Case-insensitive text search")]


def _open_service(data_dir: Optional[str], loglevel: str) -> ExplorerService:
    setup_logging(loglevel)
    try:
        index: CorpusIndex = load_corpus(data_dir)
    except CorpusLoadError as e:
        logger.error(f"Could not load corpus: {e.message}")
        sys.exit(1)
    return ExplorerService(index)


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(v) for v in value]
    return value


def _emit(value: Any) -> None:
    typer.echo(json.dumps(_jsonable(value), ensure_ascii=False, indent=2))


def _spec(
    submolt: Optional[List[str]],
    author: Optional[List[str]],
    tag: Optional[List[str]],
    note: Optional[List[str]],
    min_upvotes: int,
    min_comments: int,
    search: str,
) -> FilterSpec:
    return FilterSpec(
        submolts=submolt or [],
        authors=author or [],
        tags=tag or [],
        class_notes=note or [],
        min_upvotes=min_upvotes,
        min_comments=min_comments,
        search=search,
    )


@app.command()
def summary(
    data_dir: DataDirOption = None,
    loglevel: LogLevelOption = "WARNING",
    submolt: SubmoltOption = None,
    author: AuthorOption = None,
    tag: TagOption = None,
    note: NoteOption = None,
    min_upvotes: MinUpvotesOption = 0,
    min_comments: MinCommentsOption = 0,
    search: SearchOption = "",
) -> None:
    """Print header stats and the overview aggregates of the filtered posts."""
    service = _open_service(data_dir, loglevel)
    posts = service.filter(_spec(submolt, author, tag, note, min_upvotes, min_comments, search))
    _emit({"stats": service.header_stats(posts), "overview": service.overview(posts)})


@app.command()
def top(
    field: Annotated[str, typer.Argument(help="What to rank: submolt, author, tag or note")],
    limit: Annotated[int, typer.Option("--limit", "-n", min=0, help="Number of entries")] = 10,
    data_dir: DataDirOption = None,
    loglevel: LogLevelOption = "WARNING",
    submolt: SubmoltOption = None,
    author: AuthorOption = None,
    tag: TagOption = None,
    note: NoteOption = None,
    min_upvotes: MinUpvotesOption = 0,
    min_comments: MinCommentsOption = 0,
    search: SearchOption = "",
) -> None:
    """Rank communities, authors, tags or class notes over the filtered posts."""
    if field not in ("submolt", "author", "tag", "note"):
        logger.error(f"Unknown field: {field}")
        sys.exit(2)
    service = _open_service(data_dir, loglevel)
    posts = service.filter(_spec(submolt, author, tag, note, min_upvotes, min_comments, search))

    if field == "submolt":
        ranked = top_items(posts, "submolt_name", limit, "submolt_display_name")
    elif field == "author":
        ranked = top_items(posts, "author_name", limit)
    elif field == "tag":
        ranked = top_tags(service.index, posts, limit)
    else:
        ranked = top_class_notes(service.index, posts, limit)
    _emit(ranked)


@app.command()
def similar(
    post_id: Annotated[str, typer.Argument(help="Anchor post id")],
    k: Annotated[Optional[int], typer.Option("--k", "-k", min=0, help="Number of neighbours")] = None,
    data_dir: DataDirOption = None,
    loglevel: LogLevelOption = "WARNING",
) -> None:
    """Print the posts nearest to POST_ID in embedding space, closest first."""
    service = _open_service(data_dir, loglevel)
    limit = service.settings.similar_posts_limit if k is None else k
    _emit(nearest(service.index, post_id, limit))


@app.command()
def rect(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    kind: Annotated[str, typer.Option("--kind", help="Point collection: posts or submolts")] = "posts",
    data_dir: DataDirOption = None,
    loglevel: LogLevelOption = "WARNING",
) -> None:
    """Print the ids of the points inside the rectangle (data coordinates)."""
    if kind not in ("posts", "submolts"):
        logger.error(f"Unknown point collection: {kind}")
        sys.exit(2)
    service = _open_service(data_dir, loglevel)
    area = Rect.from_corners(x0, y0, x1, y1)
    _emit(service.posts_in_rect(area) if kind == "posts" else service.submolts_in_rect(area))


@app.command()
def graph(
    kind: Annotated[str, typer.Option("--kind", help="Graph flavor: tags or authors")] = "tags",
    threshold: Annotated[Optional[float], typer.Option("--threshold", "-t", min=0, help="Edge threshold in percent")] = None,
    data_dir: DataDirOption = None,
    loglevel: LogLevelOption = "WARNING",
    submolt: SubmoltOption = None,
    author: AuthorOption = None,
    tag: TagOption = None,
    note: NoteOption = None,
    min_upvotes: MinUpvotesOption = 0,
    min_comments: MinCommentsOption = 0,
    search: SearchOption = "",
) -> None:
    """Print the tag co-occurrence or the author/community graph."""
    if kind not in ("tags", "authors"):
        logger.error(f"Unknown graph kind: {kind}")
        sys.exit(2)
    service = _open_service(data_dir, loglevel)
    if kind == "tags":
        _emit(service.tag_network(threshold))
        return
    posts = service.filter(_spec(submolt, author, tag, note, min_upvotes, min_comments, search))
    _emit(service.author_community_network(posts, threshold))


@app.command()
def integrity(
    data_dir: DataDirOption = None,
    loglevel: LogLevelOption = "WARNING",
) -> None:
    """Print data-quality metrics, duplicate titles and outliers."""
    service = _open_service(data_dir, loglevel)
    _emit(service.integrity_report())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
