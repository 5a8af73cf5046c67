"""Jump item model shared by the provider, filters, selection and display."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .history import JumpLocation


def full_path(path: str | os.PathLike[str]) -> str:
    """Return a normalized absolute textual path without following symlinks."""
    return os.path.normpath(os.path.abspath(os.path.expanduser(os.fspath(path))))


@dataclass
class JumpItem:
    """One history entry as presented in the navigator.

    ``offset`` is the signed distance from the current entry in history
    order (negative = older). ``hidden`` is derived from the hidden-item
    registry and never persisted on the item.
    """

    location_ref: Path
    path: str
    line: int
    column: int
    history_index: int
    is_current: bool = False
    offset: int = 0
    hidden: bool = False

    @property
    def is_valid(self) -> bool:
        """Whether the underlying resource still exists."""
        try:
            return self.location_ref.is_file()
        except OSError:
            return False

    def same_position(self, other: JumpItem) -> bool:
        return self.path == other.path and self.line == other.line


def create_item(location: JumpLocation, index: int, current: int) -> JumpItem:
    """Build a jump item for the 1-based history ``index``.

    ``current`` is the 0-based history position, so the item at
    ``current + 1`` is "you are here".
    """
    if index <= current:
        offset = -(current - index + 1)
    elif index == current + 1:
        offset = 0
    else:
        offset = index - current - 1
    return JumpItem(
        location_ref=location.path,
        path=full_path(location.path),
        line=location.line,
        column=location.column,
        history_index=index,
        is_current=index == current + 1,
        offset=offset,
    )
