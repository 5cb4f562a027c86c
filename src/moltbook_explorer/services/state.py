"""
Explicit filter state for moltbook explorer.

``ExplorerState`` replaces globally reachable filter storage: the
presentation layer owns one instance, passes ``state.filters`` into queries
and registers re-render callbacks with ``on_change``. The compact codec
persists only non-default fields under short keys.
"""

import json
from typing import Any, Callable, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from ..models import FilterSpec

DEFAULT_TAB = "overview"

Listener = Callable[[FilterSpec], None]


class ExplorerState:
    """
    Current filter specification plus view selection.

    Filter mutations replace the immutable ``FilterSpec`` and notify
    listeners; tab and selected-post changes do not.
    """

    def __init__(
        self,
        filters: Optional[FilterSpec] = None,
        selected_post: Optional[str] = None,
        tab: str = DEFAULT_TAB,
    ):
        self.filters = filters or FilterSpec()
        self.selected_post = selected_post
        self.tab = tab
        self._listeners: List[Listener] = []

    def on_change(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def notify(self) -> None:
        for listener in self._listeners:
            listener(self.filters)

    def set_filters(self, **updates: Any) -> None:
        """Replace the given filter fields, validating the result."""
        self.filters = FilterSpec.model_validate({**self.filters.model_dump(), **updates})
        self.notify()

    def clear_filters(self) -> None:
        """Reset every filter and the selected post; the tab is kept."""
        self.filters = FilterSpec()
        self.selected_post = None
        self.notify()

    def _toggle(self, field: str, value: str) -> None:
        current = list(getattr(self.filters, field))
        if value in current:
            current.remove(value)
        else:
            current.append(value)
        self.set_filters(**{field: current})

    def toggle_submolt(self, name: str) -> None:
        self._toggle("submolts", name)

    def toggle_author(self, name: str) -> None:
        self._toggle("authors", name)

    def toggle_tag(self, tag: str) -> None:
        self._toggle("tags", tag)

    def toggle_class_note(self, note: str) -> None:
        self._toggle("class_notes", note)

    def set_engagement(self, min_upvotes: Optional[int] = None, min_comments: Optional[int] = None) -> None:
        updates: Dict[str, int] = {}
        if min_upvotes is not None:
            updates["min_upvotes"] = min_upvotes
        if min_comments is not None:
            updates["min_comments"] = min_comments
        self.set_filters(**updates)

    def set_search(self, query: str) -> None:
        self.set_filters(search=query)

    def set_post_ids(self, post_ids: Optional[List[str]]) -> None:
        """Restrict to an ad hoc selection; ``None`` clears it."""
        self.set_filters(post_ids=list(post_ids) if post_ids is not None else None)

    def set_selected_post(self, post_id: Optional[str]) -> None:
        self.selected_post = post_id

    def set_tab(self, tab: str) -> None:
        self.tab = tab


def to_compact(state: ExplorerState) -> Dict[str, Any]:
    """
    Serialize the non-default parts of ``state`` under short keys.

    Ad hoc ``post_ids`` selections are transient and never persisted.
    """
    f = state.filters
    compact: Dict[str, Any] = {}
    if f.submolts:
        compact["s"] = list(f.submolts)
    if f.authors:
        compact["a"] = list(f.authors)
    if f.tags:
        compact["t"] = list(f.tags)
    if f.class_notes:
        compact["n"] = list(f.class_notes)
    if f.min_upvotes > 0:
        compact["u"] = f.min_upvotes
    if f.min_comments > 0:
        compact["c"] = f.min_comments
    if f.search:
        compact["q"] = f.search
    if state.selected_post:
        compact["p"] = state.selected_post
    if state.tab and state.tab != DEFAULT_TAB:
        compact["tab"] = state.tab
    return compact


def from_compact(compact: Dict[str, Any]) -> ExplorerState:
    """
    Rebuild a state from its compact form.

    Invalid content is logged and yields the default state.
    """
    try:
        filters = FilterSpec(
            submolts=compact.get("s") or [],
            authors=compact.get("a") or [],
            tags=compact.get("t") or [],
            class_notes=compact.get("n") or [],
            min_upvotes=compact.get("u") or 0,
            min_comments=compact.get("c") or 0,
            search=compact.get("q") or "",
        )
    except (ValidationError, AttributeError) as e:
        logger.warning(f"Failed to parse filter state: {e}")
        return ExplorerState()
    return ExplorerState(
        filters=filters,
        selected_post=compact.get("p") or None,
        tab=compact.get("tab") or DEFAULT_TAB,
    )


def encode_state(state: ExplorerState) -> str:
    """Compact JSON text of ``state``; empty string for the default state."""
    compact = to_compact(state)
    if not compact:
        return ""
    return json.dumps(compact, ensure_ascii=False, separators=(",", ":"))


def decode_state(text: str) -> ExplorerState:
    """Parse ``encode_state`` output; malformed text yields the default state."""
    if not text:
        return ExplorerState()
    try:
        compact = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse filter state: {e}")
        return ExplorerState()
    if not isinstance(compact, dict):
        logger.warning(f"Failed to parse filter state: expected an object, got {type(compact).__name__}")
        return ExplorerState()
    return from_compact(compact)
