"""Hosts: the environment a navigator session runs in.

A host supplies the file/root the session filters against, opens the
window, provides the key reader and the focus probe, and delivers user
notifications.
"""

from __future__ import annotations

import contextlib
import logging
import os
import sys
from collections.abc import Callable, Iterable, Iterator
from typing import Protocol

from .input import ScriptedInput, TerminalInput
from .terminal import TerminalController
from .window import MemoryWindow, TerminalWindow, WindowConfig, WindowConfigSource, WindowHandle, compute_config

log = logging.getLogger(__name__)

NOTIFY_PREFIX = "(jumpnav) "


class Host(Protocol):
    def original_path(self) -> str: ...

    def root(self) -> str: ...

    def window_config(self, window_config: WindowConfigSource) -> WindowConfig: ...

    def open_window(self, window_config: WindowConfigSource) -> WindowHandle: ...

    def reader(self): ...

    def has_focus(self) -> bool: ...

    def notify(self, message: str, level: int = logging.INFO) -> None: ...

    def attached(self) -> contextlib.AbstractContextManager[None]: ...


class TerminalHost:
    """Runs the navigator on the controlling terminal."""

    def __init__(self, stdin_fd: int, stdout_fd: int, path: str = "", root: str | None = None) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.path = path
        self._root = root if root is not None else os.getcwd()
        self.terminal = TerminalController(stdin_fd, stdout_fd)

    @classmethod
    def from_std(cls, path: str = "") -> TerminalHost:
        return cls(sys.stdin.fileno(), sys.stdout.fileno(), path=path)

    def original_path(self) -> str:
        return self.path

    def root(self) -> str:
        return self._root

    def window_config(self, window_config: WindowConfigSource) -> WindowConfig:
        columns, lines = self.terminal.size()
        return compute_config(window_config, columns=columns, lines=lines)

    def open_window(self, window_config: WindowConfigSource) -> WindowHandle:
        return TerminalWindow(self.stdout_fd, self.window_config(window_config))

    def reader(self) -> TerminalInput:
        return TerminalInput(self.stdin_fd)

    def has_focus(self) -> bool:
        return self.terminal.has_focus()

    def notify(self, message: str, level: int = logging.INFO) -> None:
        log.log(level, message)
        try:
            sys.stderr.write(f"{NOTIFY_PREFIX}{message}\n")
            sys.stderr.flush()
        except OSError:
            pass

    @contextlib.contextmanager
    def attached(self) -> Iterator[None]:
        with self.terminal.raw_mode():
            yield


class HeadlessHost:
    """Host backed by an in-memory window and a scripted key sequence."""

    def __init__(
        self,
        keys: Iterable[str | None] = (),
        path: str = "",
        root: str = "",
        columns: int = 80,
        lines: int = 24,
        on_read: Callable[[int], None] | None = None,
    ) -> None:
        self.keys = list(keys)
        self.on_read = on_read
        self.path = path
        self._root = root
        self.columns = columns
        self.lines = lines
        self.focus = True
        self.notifications: list[tuple[int, str]] = []
        self.window: MemoryWindow | None = None
        self.input: ScriptedInput | None = None

    def original_path(self) -> str:
        return self.path

    def root(self) -> str:
        return self._root

    def window_config(self, window_config: WindowConfigSource) -> WindowConfig:
        return compute_config(window_config, columns=self.columns, lines=self.lines)

    def open_window(self, window_config: WindowConfigSource) -> MemoryWindow:
        self.window = MemoryWindow(self.window_config(window_config))
        return self.window

    def reader(self) -> ScriptedInput:
        self.input = ScriptedInput(self.keys, on_read=self.on_read)
        return self.input

    def has_focus(self) -> bool:
        return self.focus

    def notify(self, message: str, level: int = logging.INFO) -> None:
        log.log(level, message)
        self.notifications.append((level, message))

    @contextlib.contextmanager
    def attached(self) -> Iterator[None]:
        yield
