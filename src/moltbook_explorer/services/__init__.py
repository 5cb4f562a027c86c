"""
Services module for moltbook explorer.

This module provides corpus loading, filter state handling and the
composed explorer operations.
"""

from .explorer_service import ExplorerService
from .loader import load_corpus, read_records
from .state import ExplorerState, decode_state, encode_state, from_compact, to_compact

__all__ = [
    "ExplorerService",
    "ExplorerState",
    "decode_state",
    "encode_state",
    "from_compact",
    "load_corpus",
    "read_records",
    "to_compact",
]
