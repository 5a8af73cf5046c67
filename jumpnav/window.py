"""Floating window handles for the navigator surface.

``compute_config`` sizes a bordered box anchored at the bottom-left of the
terminal. ``TerminalWindow`` paints frames with ANSI cursor addressing;
``MemoryWindow`` keeps frames in memory for headless use and tests.
"""

from __future__ import annotations

import math
import os
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Protocol

from .ansi import clip_ansi_line, display_width, pad_ansi_line
from .config import check_type, check_window_config

GOLDEN_RATIO = 0.618

BORDERS: dict[str, tuple[str, str, str, str, str, str]] = {
    # top-left, horizontal, top-right, vertical, bottom-left, bottom-right
    "single": ("┌", "─", "┐", "│", "└", "┘"),
    "rounded": ("╭", "─", "╮", "│", "╰", "╯"),
    "double": ("╔", "═", "╗", "║", "╚", "╝"),
    "none": (" ", " ", " ", " ", " ", " "),
}

REVERSE = "\x1b[7m"
RESET = "\x1b[0m"


@dataclass(frozen=True)
class WindowConfig:
    """Inner size plus bottom-left anchor (1-based terminal cells)."""

    width: int
    height: int
    col: int = 1
    row: int = 1
    border: str = "single"

    @property
    def bottom_border(self) -> str:
        return BORDERS.get(self.border, BORDERS["single"])[1]


@dataclass
class Frame:
    """One rendered state of the window: border texts and body rows."""

    title: str = ""
    rows: list[str] = field(default_factory=list)
    current_row: int | None = None
    footer: str = ""


WindowConfigSource = Mapping[str, object] | Callable[[], Mapping[str, object]] | None


def compute_config(
    window_config: WindowConfigSource = None,
    columns: int | None = None,
    lines: int | None = None,
) -> WindowConfig:
    """Merge user overrides over golden-ratio defaults for the terminal size."""
    if columns is None or lines is None:
        term = shutil.get_terminal_size((80, 24))
        columns = term.columns if columns is None else columns
        lines = term.lines if lines is None else lines
    max_width = max(3, columns)
    max_height = max(3, lines)

    config = WindowConfig(
        width=math.floor(GOLDEN_RATIO * max_width),
        height=math.floor(GOLDEN_RATIO * max_height),
        col=1,
        row=max_height,
    )
    overrides = window_config() if callable(window_config) else window_config
    check_type("window.config", overrides, Mapping, allow_none=True)
    if overrides:
        check_window_config(overrides)
        known = {key: value for key, value in overrides.items() if key in WindowConfig.__dataclass_fields__}
        config = replace(config, **known)

    return replace(
        config,
        width=max(1, min(config.width, max_width - 2)),
        height=max(1, min(config.height, max_height - 2)),
        border=config.border if config.border in BORDERS else "single",
    )


class WindowHandle(Protocol):
    """Operations the session needs from its on-screen surface."""

    config: WindowConfig

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def is_valid(self) -> bool: ...

    def resize(self, config: WindowConfig) -> None: ...

    def paint(self, frame: Frame) -> None: ...

    def close(self) -> None: ...


class MemoryWindow:
    """In-memory window: keeps the latest frame and a paint counter."""

    def __init__(self, config: WindowConfig | None = None) -> None:
        self.config = config if config is not None else WindowConfig(width=60, height=10)
        self.frame = Frame()
        self.paint_count = 0
        self._valid = True

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def is_valid(self) -> bool:
        return self._valid

    def resize(self, config: WindowConfig) -> None:
        self.config = config

    def paint(self, frame: Frame) -> None:
        if not self._valid:
            return
        self.frame = frame
        self.paint_count += 1

    def close(self) -> None:
        self._valid = False


class TerminalWindow(MemoryWindow):
    """Window painted directly onto the terminal with cursor addressing."""

    def __init__(self, stdout_fd: int, config: WindowConfig) -> None:
        super().__init__(config)
        self.stdout_fd = stdout_fd

    def _top(self) -> int:
        return max(1, self.config.row - self.config.height - 1)

    def _write(self, payload: str) -> None:
        try:
            os.write(self.stdout_fd, payload.encode("utf-8", errors="replace"))
        except OSError:
            self._valid = False

    def _border_line(self, left: str, fill: str, right: str, text: str) -> str:
        body = clip_ansi_line(text, self.config.width)
        return f"{left}{body}{fill * (self.config.width - display_width(body))}{right}"

    def paint(self, frame: Frame) -> None:
        if not self._valid:
            return
        top_left, horizontal, top_right, vertical, bottom_left, bottom_right = BORDERS[self.config.border]
        top = self._top()
        col = self.config.col
        out: list[str] = ["\x1b[?25l"]
        out.append(f"\x1b[{top};{col}H{self._border_line(top_left, horizontal, top_right, frame.title)}")
        for offset in range(self.config.height):
            text = frame.rows[offset] if offset < len(frame.rows) else ""
            cell = pad_ansi_line(text, self.config.width)
            if frame.current_row == offset:
                cell = REVERSE + cell + RESET
            else:
                cell = cell + RESET
            out.append(f"\x1b[{top + 1 + offset};{col}H{vertical}{cell}{vertical}")
        bottom = top + self.config.height + 1
        out.append(f"\x1b[{bottom};{col}H{self._border_line(bottom_left, horizontal, bottom_right, frame.footer)}")
        self._write("".join(out))
        self.frame = frame
        self.paint_count += 1

    def close(self) -> None:
        if not self._valid:
            return
        top = self._top()
        blank = " " * (self.config.width + 2)
        rows = [f"\x1b[{top + offset};{self.config.col}H{blank}" for offset in range(self.config.height + 2)]
        self._write("".join(rows))
        self._valid = False
