"""Display collaborator: turns session state into window frames.

Owns list-row formatting, preview loading, and the border title/footer.
Every entry point is safe on an empty visible list and on closed windows.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from . import filters
from .ansi import fit_to_width
from .highlight import line_preview, preview_lines
from .items import JumpItem, full_path
from .logs import trace
from .selection import get_selection
from .window import Frame

if TYPE_CHECKING:
    from .session import Session

log = logging.getLogger(__name__)

SYMBOL_CURRENT = "●"
SYMBOL_HIDDEN = "✗"
SYMBOL_UP = "↑"
SYMBOL_DOWN = "↓"
SEPARATOR_SPACED = " │ "

EMPTY_FILTERED = "No matching items"
EMPTY_SOURCE = "No items available"

AMBIGUOUS_NAMES = frozenset(
    {
        "__init__.py",
        "main.py",
        "setup.py",
        "init.lua",
        "index.js",
        "index.ts",
        "index.jsx",
        "index.tsx",
        "index.html",
        "index.css",
        "config.json",
        "package.json",
        "tsconfig.json",
        "Makefile",
        "CMakeLists.txt",
        "Dockerfile",
    }
)


def smart_filename(path: str, root: str | None = None) -> str:
    """Short display name: basename under ``root``, parent for ambiguous names."""
    if not path:
        return ""
    name = os.path.basename(path)
    if name in AMBIGUOUS_NAMES:
        parent = os.path.basename(os.path.dirname(path))
        return f"{parent}/{name}"

    absolute = full_path(path)
    base = full_path(root) if root else full_path(os.getcwd())
    if not absolute.startswith(base):
        home = os.path.expanduser("~")
        if home and absolute.startswith(home):
            return "~" + absolute[len(home) :]
        return os.path.relpath(absolute)
    return name


def position_marker(item: JumpItem | None) -> str:
    """Return ``●`` for the current entry, ``↑N`` older, ``↓N`` newer."""
    if item is None:
        return " "
    if item.is_current or item.offset == 0:
        return SYMBOL_CURRENT
    if item.offset < 0:
        return f"{SYMBOL_UP}{abs(item.offset)}"
    return f"{SYMBOL_DOWN}{item.offset}"


def item_to_string(
    item: JumpItem | None,
    show_preview: bool = True,
    root: str | None = None,
    content: str | None = None,
) -> str:
    """Format ``[indicator] [path/name] [line:col]`` plus an optional line preview.

    ``content`` supplies an already loaded preview instead of reading the file.
    """
    if item is None:
        return ""
    indicator = SYMBOL_HIDDEN if item.hidden else position_marker(item)
    core = f"{indicator} {smart_filename(item.path, root)} {item.line}:{item.column}"
    if not show_preview:
        return core
    if content is None:
        content = line_preview(item.location_ref, item.line)
    return f"{core}{SEPARATOR_SPACED}{content}" if content else core


def _sanitize_row(text: str) -> str:
    return text.replace("\x00", "│").replace("\r", " ").replace("\n", " ")


@dataclass
class GeneralInfo:
    source_name: str
    source_root: str
    n_total: int | str
    relative_current_ind: int | str
    position_indicator: str
    filter_indicator: str
    status_text: str

    def as_dict(self) -> dict[str, object]:
        return dict(self.__dict__)


def general_info(session: Session) -> GeneralInfo:
    """Summarize position, pending count and filters for the footer and ``get_state``."""
    position_indicator = SYMBOL_CURRENT
    if session.items:
        selected = session.current_ind or 1
        up_count = selected - 1
        down_count = len(session.items) - selected
        position_indicator = f"{SYMBOL_UP}{up_count}{SYMBOL_CURRENT}{SYMBOL_DOWN}{down_count}"
        if session.pending_count:
            position_indicator += f"×{session.pending_count}"

    filter_text = filters.status_text(session.filters)
    if filter_text:
        filter_text = SEPARATOR_SPACED + filter_text

    root = session.source.root
    home = os.path.expanduser("~")
    if root and home and root.startswith(home):
        root = "~" + root[len(home) :]
    return GeneralInfo(
        source_name=session.source.name or "---",
        source_root=root or "---",
        n_total=len(session.items) if session.items else "-",
        relative_current_ind=session.current_ind if session.current_ind is not None else "-",
        position_indicator=position_indicator,
        filter_indicator=filter_text,
        status_text=position_indicator + filter_text,
    )


@dataclass
class Display:
    """Frame composer for one session window."""

    preview_context_lines: int = 0
    title: str = ""
    footer: str = ""
    list_rows: list[str] = field(default_factory=list)
    list_current_row: int | None = None
    preview_rows: list[str] = field(default_factory=list)
    preview_current_row: int | None = None
    line_previews: dict[tuple[Path, int], str] = field(default_factory=dict)

    def line_preview(self, item: JumpItem) -> str:
        """Return the row preview for ``item``, reading its file once per session."""
        key = (item.location_ref, item.line)
        if key not in self.line_previews:
            self.line_previews[key] = line_preview(item.location_ref, item.line)
        return self.line_previews[key]

    def update_lines(self, session: Session) -> None:
        """Rebuild list rows for the visible range (or the empty-state message)."""
        if not session.window.is_valid():
            return
        if not session.items:
            empty = EMPTY_FILTERED if filters.status_text(session.filters) else EMPTY_SOURCE
            self.list_rows = [empty]
            self.list_current_row = None
            return

        shown = list(session.visible_range.indices())
        root = session.source.root or None
        self.list_rows = [
            _sanitize_row(item_to_string(item, root=root, content=self.line_preview(item)))
            for item in (session.items[i - 1] for i in shown)
        ]
        self.list_current_row = shown.index(session.current_ind) if session.current_ind in shown else None

    def update_border(self, session: Session) -> None:
        """Set the title (preview mode only) and the status footer."""
        if not session.window.is_valid():
            return
        width = session.window.width
        self.title = ""
        if session.view_state == "preview":
            item = get_selection(session)
            if item is not None:
                text = item_to_string(item, show_preview=False, root=session.source.root or None)
                self.title = fit_to_width(f" {_sanitize_row(text)} ", width)
        self.footer = self.compute_footer(session, width)

    def compute_footer(self, session: Session, width: int) -> str:
        info = general_info(session)
        source_name = f" {info.source_name} "
        status = f" {info.status_text} "
        footer = fit_to_width(source_name, width)
        gap = width - (len(source_name) + len(status))
        if gap > 0:
            footer += session.window.config.bottom_border * gap + status
        return footer

    def render_list(self, session: Session) -> None:
        session.view_state = "list"
        self.update_border(session)
        self.paint(session)

    def render_preview(self, session: Session) -> None:
        """Show the selected item's file around its line; no-op without selection."""
        item = get_selection(session)
        if item is None:
            return
        height = max(1, session.window.height)
        context = self.preview_context_lines or 2 * height
        lines = preview_lines(Path(item.location_ref), item.line, context, session.options.preview_style)
        target = item.line - 1
        start = max(0, min(target - height // 2, max(0, len(lines) - height)))
        self.preview_rows = lines[start : start + height]
        self.preview_current_row = target - start if 0 <= target - start < len(self.preview_rows) else None
        trace(log, "render_preview: %s:%s rows=%d", item.path, item.line, len(self.preview_rows))
        session.view_state = "preview"
        self.update_border(session)
        self.paint(session)

    def render(self, session: Session) -> None:
        if session.view_state == "preview":
            self.render_preview(session)
        else:
            self.render_list(session)

    def frame(self, session: Session) -> Frame:
        if session.view_state == "preview" and get_selection(session) is not None:
            rows, current = self.preview_rows, self.preview_current_row
        else:
            rows, current = self.list_rows, self.list_current_row
        return Frame(title=self.title, rows=list(rows), current_row=current, footer=self.footer)

    def paint(self, session: Session) -> None:
        if session.window.is_valid():
            session.window.paint(self.frame(session))
