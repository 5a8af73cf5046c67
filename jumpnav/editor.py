"""Editor launch helper for opening a chosen jump location.

Runs ``$EDITOR +LINE PATH``. A split layout opens the chosen file next to
the file the navigator was started from. Returns an error message string
instead of raising.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path

# vim-style window flags for opening two files side by side.
LAYOUT_FLAGS = {"split": "-o", "vsplit": "-O", "tab": "-p"}


def editor_command(
    editor: list[str],
    target: Path,
    line: int,
    layout: str | None = None,
    origin: str = "",
) -> list[str]:
    cmd = list(editor)
    flag = LAYOUT_FLAGS.get(layout or "")
    if flag and origin and Path(origin) != target:
        return [*cmd, flag, f"+{max(1, line)}", str(target), origin]
    return [*cmd, f"+{max(1, line)}", str(target)]


def launch_editor(target: Path, line: int = 1, layout: str | None = None, origin: str = "") -> str | None:
    editor_env = os.environ.get("EDITOR", "").strip()
    if not editor_env:
        return "Cannot edit: $EDITOR is not set."
    cmd = shlex.split(editor_env)
    if not cmd:
        return "Cannot edit: $EDITOR is empty."

    try:
        subprocess.run(editor_command(cmd, target, line, layout, origin), check=False)
    except Exception as exc:
        return f"Failed to launch editor: {exc}"
    return None
