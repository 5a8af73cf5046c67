"""Selection model: current index, scroll window and wrap/clamp movement.

All indices are 1-based into the session's visible (filtered) items. An
empty visible list always means "no selection" and is never an error.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .items import JumpItem
from .logs import trace

if TYPE_CHECKING:
    from .session import Session

log = logging.getLogger(__name__)


@dataclass
class VisibleRange:
    """Inclusive 1-based slice of visible items currently rendered."""

    first: int | None = None
    last: int | None = None

    def contains(self, index: int) -> bool:
        return self.first is not None and self.last is not None and self.first <= index <= self.last

    def indices(self) -> range:
        if self.first is None or self.last is None:
            return range(0)
        return range(self.first, self.last + 1)


def wrap_index(index: int, count: int) -> int:
    """Wrap any integer into ``[1, count]``."""
    return (index - 1) % count + 1


def compute_range(index: int, count: int, height: int) -> VisibleRange:
    """Center ``index`` in a viewport of ``height`` rows, clamped to the list."""
    height = max(1, height)
    last = min(count, math.floor(index + 0.5 * height))
    first = max(1, last - height + 1)
    last = first + min(height, count) - 1
    return VisibleRange(first, last)


def set_selection(session: Session, index: int | None, force_update: bool = False) -> None:
    """Select ``index`` (wrapped into range) and rescroll when needed."""
    if not session.items:
        trace(log, "set_selection: empty items")
        session.current_ind = None
        session.visible_range = VisibleRange()
        return

    count = len(session.items)
    index = wrap_index(1 if index is None else index, count)
    trace(log, "set_selection: old=%s new=%s force=%s", session.current_ind, index, force_update)

    visible_range = session.visible_range
    needs_update = not visible_range.contains(index)
    if (force_update or needs_update) and session.window.is_valid():
        visible_range = compute_range(index, count, session.window.height)

    session.current_ind = index
    session.visible_range = visible_range


def move_selection(session: Session, by: int, to: int | None = None) -> None:
    """Move by a signed delta, or to an absolute position when ``to`` is given."""
    if not session.items:
        trace(log, "move_selection: empty items")
        return

    count = len(session.items)
    if to is None:
        wrap_edges = session.options.wrap_edges
        to = session.current_ind or 1
        trace(log, "move_selection: by=%s from=%s wrap_edges=%s", by, to, wrap_edges)
        if wrap_edges and to == 1 and by < 0:
            to = count
        elif wrap_edges and to == count and by > 0:
            to = 1
        elif wrap_edges:
            to = wrap_index(to + by, count)
        else:
            to = to + by
            if to < 1 or to > count:
                log.debug("move_selection: edge reached, no wrap, clamping")
        to = min(max(to, 1), count)

    trace(log, "move_selection: final selection=%s", to)
    set_selection(session, to)

    if session.view_state == "preview":
        session.display.render_preview(session)


def get_selection(session: Session) -> JumpItem | None:
    """Return the selected visible item, or ``None`` without a valid selection."""
    if not session.items or session.current_ind is None:
        return None
    if not 1 <= session.current_ind <= len(session.items):
        return None
    return session.items[session.current_ind - 1]


def nearest_by_offset(items: list[JumpItem], target_offset: int) -> int:
    """Return the 1-based index with the smallest offset distance (first wins ties)."""
    best_index = 1
    best_diff = abs(items[0].offset - target_offset)
    for index, item in enumerate(items, start=1):
        diff = abs(item.offset - target_offset)
        if diff < best_diff:
            best_diff = diff
            best_index = index
    return best_index


def preserve_selection(previous: JumpItem | None, items: list[JumpItem]) -> int | None:
    """Pick the index in ``items`` that best continues the old selection.

    Exact ``(path, line)`` match first, then nearest offset, then the first
    item. ``None`` only when ``items`` is empty.
    """
    if not items:
        return None
    if previous is None:
        return 1
    for index, item in enumerate(items, start=1):
        if item.same_position(previous):
            return index
    return nearest_by_offset(items, previous.offset)


def initial_selection(
    original_items: list[JumpItem],
    filtered_items: list[JumpItem],
    original_selection: int | None,
) -> int | None:
    """Map a raw-list selection hint onto the filtered list."""
    if not filtered_items:
        return None
    if not original_selection or original_selection <= 0 or not original_items:
        return 1
    clamped = min(original_selection, len(original_items))
    return preserve_selection(original_items[clamped - 1], filtered_items)
