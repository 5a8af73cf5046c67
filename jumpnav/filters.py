"""Filter engine for jump items.

Filtering is a pure, order-preserving function of the item list, the
three-way ``FilterState`` and the ``FilterContext`` captured at session start.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .items import JumpItem, full_path

log = logging.getLogger(__name__)

FILTER_BRACKET_OPEN = "["
FILTER_BRACKET_CLOSE = "]"
FILTER_SEPARATOR = ","
FILTER_FILE = "f"
FILTER_ROOT = "c"
FILTER_HIDDEN = "."


@dataclass
class FilterState:
    """Session-local filter toggles; all start disabled."""

    file_only: bool = False
    root_only: bool = False
    show_hidden: bool = False


@dataclass(frozen=True)
class FilterContext:
    """File and root that were active when the session started."""

    original_path: str
    original_root: str

    @classmethod
    def capture(cls, path: str, root: str) -> FilterContext:
        return cls(
            original_path=full_path(path) if path else "",
            original_root=full_path(root) if root else "",
        )


def is_under_root(path: str, root: str) -> bool:
    """Return whether normalized ``path`` lives inside normalized ``root``."""
    if not root:
        return False
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)


def apply(
    items: list[JumpItem],
    filters: FilterState,
    context: FilterContext,
) -> list[JumpItem]:
    """Return the items that pass the active filters, in original order."""
    if not items:
        log.debug("apply: empty items")
        return items

    log.debug(
        "apply: items=%d file_only=%s root_only=%s show_hidden=%s",
        len(items),
        filters.file_only,
        filters.root_only,
        filters.show_hidden,
    )
    filtered: list[JumpItem] = []
    for item in items:
        item_path = full_path(item.path)
        if filters.file_only and item_path != context.original_path:
            continue
        if filters.root_only and not is_under_root(os.path.dirname(item_path), context.original_root):
            continue
        if not filters.show_hidden and item.hidden:
            continue
        filtered.append(item)

    log.debug("apply: filtered from %d to %d items", len(items), len(filtered))
    if not filtered:
        log.warning("apply: all items filtered out")
    return filtered


def status_text(filters: FilterState) -> str:
    """Return the compact ``[f,c,.] `` indicator, or ``""`` when nothing is on."""
    parts = active_list(filters, symbols=True)
    if not parts:
        return ""
    return FILTER_BRACKET_OPEN + FILTER_SEPARATOR.join(parts) + FILTER_BRACKET_CLOSE + " "


def active_list(filters: FilterState, symbols: bool = False) -> list[str]:
    """List the enabled filters by name (or by indicator symbol)."""
    active: list[str] = []
    if filters.file_only:
        active.append(FILTER_FILE if symbols else "file_only")
    if filters.root_only:
        active.append(FILTER_ROOT if symbols else "root_only")
    if filters.show_hidden:
        active.append(FILTER_HIDDEN if symbols else "show_hidden")
    return active


def is_active(filters: FilterState) -> bool:
    return filters.file_only or filters.root_only or filters.show_hidden


def toggle_file(filters: FilterState) -> FilterState:
    filters.file_only = not filters.file_only
    log.info("File filter %s", "enabled" if filters.file_only else "disabled")
    return filters


def toggle_root(filters: FilterState) -> FilterState:
    filters.root_only = not filters.root_only
    log.info("Root filter %s", "enabled" if filters.root_only else "disabled")
    return filters


def toggle_hidden(filters: FilterState) -> FilterState:
    filters.show_hidden = not filters.show_hidden
    log.info("Show hidden %s", "enabled" if filters.show_hidden else "disabled")
    return filters


def reset(filters: FilterState) -> FilterState:
    """Turn every filter off."""
    filters.file_only = False
    filters.root_only = False
    filters.show_hidden = False
    log.info("All filters reset")
    return filters
