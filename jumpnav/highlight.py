"""Preview source loading, sanitization, and syntax highlighting.

Highlighting goes through Pygments; control bytes are neutralized so a
previewed file cannot move the cursor or ring the bell.
"""

from __future__ import annotations

import itertools
import re
from functools import lru_cache
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
DEFAULT_STYLE = "monokai"
LINE_PREVIEW_LIMIT = 50


def read_lines(path: Path, limit: int) -> list[str]:
    """Return up to ``limit`` lines of ``path``; ``[]`` when it cannot be read.

    The file is read only as far as needed.
    """
    try:
        with path.open("r", encoding="utf-8-sig", errors="replace") as handle:
            return [line.rstrip("\r\n") for line in itertools.islice(handle, max(0, limit))]
    except OSError:
        return []


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def line_preview(path: Path, line: int) -> str:
    """Return the stripped text at 1-based ``line``, truncated for list rows."""
    lines = read_lines(path, limit=line)
    if len(lines) < line:
        return ""
    content = sanitize_terminal_text(lines[line - 1].strip())
    if len(content) > LINE_PREVIEW_LIMIT:
        content = content[: LINE_PREVIEW_LIMIT - 3] + "..."
    return content


@lru_cache(maxsize=16)
def _normalize_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


@lru_cache(maxsize=16)
def _formatter_for_style(style: str) -> TerminalFormatter:
    return TerminalFormatter(style=_normalize_style(style))


def colorize_source(source: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    """Return ``source`` highlighted for a terminal, or unchanged on failure."""
    source = sanitize_terminal_text(source)
    try:
        lexer = get_lexer_for_filename(path.name, source, stripnl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False)
    try:
        return pygments_highlight(source, lexer, _formatter_for_style(style))
    except Exception:
        return source


def preview_lines(path: Path, line: int, context_lines: int, style: str = DEFAULT_STYLE) -> list[str]:
    """Load highlighted lines up to ``line + context_lines`` for the preview view."""
    lines = read_lines(path, limit=max(1, line) + max(0, context_lines))
    if not lines:
        return []
    rendered = colorize_source("\n".join(lines) + "\n", path, style)
    return rendered.splitlines()
