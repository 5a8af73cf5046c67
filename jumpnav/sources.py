"""Item provider: turns the persisted jump list into annotated jump items.

Items come out most-recent-first, carry their signed offset from the
current entry, and are pre-marked with hidden status.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable

from .filters import is_under_root
from .hide import HiddenRegistry
from .history import JumpHistory
from .items import JumpItem, create_item, full_path

log = logging.getLogger(__name__)

SOURCE_NAME = "Jumplist"


@dataclass
class Source:
    """Items to pick from plus the callbacks used to act on a choice."""

    name: str
    items: list[JumpItem]
    initial_selection: int | None = None
    root: str = ""
    choose: Callable[..., object] | None = None


def get_all(
    history: JumpHistory,
    registry: HiddenRegistry,
    root_only: bool = False,
    root: str = "",
) -> list[JumpItem]:
    """Collect valid jump items, newest first, marked with hidden status.

    ``root_only`` without a ``root`` restricts to the working directory.
    """
    current_root = full_path(root or os.getcwd()) if root_only else ""
    collected: list[JumpItem] = []
    for index, location in enumerate(history.entries, start=1):
        item = create_item(location, index, history.current)
        if not item.is_valid:
            continue
        if root_only and not is_under_root(item.path, current_root):
            continue
        collected.append(item)

    collected.reverse()
    registry.mark_items(collected)
    return collected


def find_target_offset(items: list[JumpItem], target_offset: int, wrap_edges: bool = False) -> int:
    """Return the 1-based index of the item best matching ``target_offset``.

    Priority: exact offset, furthest item in the requested direction,
    the current item, wrap-around to the opposite extreme (when
    ``wrap_edges``), and finally the first item.
    """
    best_same_direction: int | None = None
    current_position: int | None = None
    min_backward: int | None = None
    max_forward: int | None = None

    for index, item in enumerate(items, start=1):
        if item.offset == target_offset:
            return index

        if item.offset < 0 and (min_backward is None or item.offset < items[min_backward - 1].offset):
            min_backward = index
        if item.offset > 0 and (max_forward is None or item.offset > items[max_forward - 1].offset):
            max_forward = index

        if target_offset != 0 and item.offset != 0:
            same_direction = (target_offset > 0) == (item.offset > 0)
            if same_direction:
                best = items[best_same_direction - 1] if best_same_direction is not None else None
                if (
                    best is None
                    or (target_offset > 0 and item.offset > best.offset)
                    or (target_offset < 0 and item.offset < best.offset)
                ):
                    best_same_direction = index

        if item.offset == 0:
            current_position = index

    if wrap_edges and best_same_direction is None:
        if target_offset > 0 and min_backward is not None:
            return min_backward
        if target_offset < 0 and max_forward is not None:
            return max_forward

    if best_same_direction is not None:
        return best_same_direction
    if current_position is not None:
        return current_position
    return 1


def create_source(
    history: JumpHistory,
    registry: HiddenRegistry,
    offset: int = -1,
    root_only: bool = False,
    root: str = "",
    wrap_edges: bool = False,
) -> Source | None:
    """Build the jump-list source, or ``None`` when there is nothing to show."""
    log.debug("create_source: requested offset=%s", offset)
    items = get_all(history, registry, root_only=root_only, root=root)
    log.debug("create_source: found %d jumps", len(items))
    if not items:
        log.warning("create_source: no jumps available")
        return None

    initial_selection = find_target_offset(items, offset, wrap_edges=wrap_edges)
    log.debug("create_source: initial_selection=%s", initial_selection)
    return Source(
        name=SOURCE_NAME,
        items=items,
        initial_selection=initial_selection,
        root=full_path(root) if root else "",
    )
