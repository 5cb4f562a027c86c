"""
Corpus loader for moltbook explorer.

Reads the JSON record files of one corpus snapshot from a directory and
builds the index. Structural problems fail here, before any query runs.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from ..config import get_settings
from ..core import CorpusIndex
from ..exceptions import CorpusLoadError

RECORD_FILES = {
    "posts": "posts.json",
    "submolts": "submolts.json",
    "post_tags": "post_tags.json",
    "post_class_notes": "post_class_notes.json",
    "tag_edges": "tag_edges.json",
    "submolt_umap": "submolt_umap.json",
    "post_embeddings": "post_embeddings.json",
}
SCHEMA_FILE = "schema.json"


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise CorpusLoadError("file not found", source=str(path)) from e
    except json.JSONDecodeError as e:
        raise CorpusLoadError(f"invalid JSON: {e}", source=str(path)) from e
    except UnicodeDecodeError as e:
        raise CorpusLoadError(f"not valid UTF-8: {e}", source=str(path)) from e
    except OSError as e:
        raise CorpusLoadError(f"cannot read file: {e}", source=str(path)) from e


def read_records(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read one record file.

    Raises:
        CorpusLoadError: If the file is missing, not JSON, or not a list
    """
    path = Path(path)
    data = _read_json(path)
    if not isinstance(data, list):
        raise CorpusLoadError(f"expected a JSON list, got {type(data).__name__}", source=str(path))
    return data


def load_corpus(data_dir: Optional[Union[str, Path]] = None) -> CorpusIndex:
    """
    Load every record file under ``data_dir`` and build the corpus index.

    Args:
        data_dir: Directory holding the record files; defaults to the
            configured ``data_dir``

    Returns:
        CorpusIndex: Fully built index

    Raises:
        CorpusLoadError: On a missing or malformed file or record
    """
    base = Path(data_dir or get_settings().data_dir)
    logger.info(f"Loading corpus from {base}")

    schema: Dict[str, Any] = {}
    schema_path = base / SCHEMA_FILE
    if schema_path.exists():
        logger.info("Loading schema...")
        loaded = _read_json(schema_path)
        if not isinstance(loaded, dict):
            raise CorpusLoadError("expected a JSON object", source=str(schema_path))
        schema = loaded

    records: Dict[str, List[Dict[str, Any]]] = {}
    for name, filename in RECORD_FILES.items():
        logger.info(f"Loading {name.replace('_', ' ')}...")
        try:
            records[name] = read_records(base / filename)
        except CorpusLoadError as e:
            logger.error(f"Failed to load corpus: {e.message}")
            raise

    logger.info("Building indexes...")
    try:
        index = CorpusIndex.build(schema=schema, **records)
    except CorpusLoadError as e:
        logger.error(f"Failed to build corpus index: {e.message}")
        raise

    logger.info(f"Corpus ready: {len(index.posts)} posts, {len(index.submolts)} submolts")
    return index
