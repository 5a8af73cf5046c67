"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into key tokens shared with
``keymap.normalize_key``. A read returns ``""`` when the bounded wait
elapses and ``None`` when input is aborted (Ctrl-C, EOF, or cancellation).
"""

from __future__ import annotations

import os
import select
from collections.abc import Callable, Iterable

ESC_SEQUENCE_TIMEOUT_MS = 25
READ_TIMEOUT_MS = 120
CSI_TOKEN = "CSI"

_ABORT_BYTES = {b"\x03"}
_NAMED_BYTES = {
    b"\t": "TAB",
    b"\r": "ENTER",
    b"\n": "ENTER",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
}
_ARROWS = {b"A": "UP", b"B": "DOWN", b"C": "RIGHT", b"D": "LEFT"}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


class TerminalInput:
    """Key reader over a raw-mode file descriptor with cancellation support."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self.cancelled = False
        self._pending: list[bytes] = []

    def cancel(self) -> None:
        """Make the next read report an abort."""
        self.cancelled = True

    def _next_byte(self, timeout_ms: int | None) -> bytes | None:
        """Return one byte, ``None`` on timeout, or ``b""`` at end of input."""
        if self._pending:
            return self._pending.pop(0)
        if timeout_ms is not None:
            ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return None
        return os.read(self.fd, 1)

    def read(self, timeout_ms: int | None = READ_TIMEOUT_MS) -> str | None:
        if self.cancelled:
            return None
        try:
            ch = self._next_byte(timeout_ms)
        except OSError:
            return None
        if ch is None:
            return ""
        if not ch:
            return None
        return self._decode(ch)

    def _decode(self, ch: bytes) -> str | None:
        if ch in _ABORT_BYTES:
            return None
        if ch in _NAMED_BYTES:
            return _NAMED_BYTES[ch]
        code = ch[0]
        if 1 <= code <= 26:
            return f"CTRL_{chr(code + 64)}"
        if ch == b"\x1b":
            return self._decode_escape()

        data = ch
        for _ in range(_utf8_length(code) - 1):
            part = _read_ready_byte(self.fd, ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                break
            data += part
        return data.decode("utf-8", errors="replace")

    def _decode_escape(self) -> str:
        seq = _read_ready_byte(self.fd, ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        if seq != b"[":
            self._pending.append(seq)
            return "ESC"
        params = b""
        while True:
            seq = _read_ready_byte(self.fd, ESC_SEQUENCE_TIMEOUT_MS)
            if seq is None:
                return "ESC" if not params else CSI_TOKEN
            if 0x40 <= seq[0] <= 0x7E:
                break
            params += seq
        # Keys like Home, PgUp or modified arrows are consumed whole and stay unmapped.
        if params:
            return CSI_TOKEN
        return _ARROWS.get(seq, CSI_TOKEN)


class ScriptedInput:
    """Input that replays a fixed key sequence, then reports an abort.

    ``on_read`` runs before each read, which lets callers fire timers or
    mutate the session between keys.
    """

    def __init__(self, keys: Iterable[str | None], on_read: Callable[[int], None] | None = None) -> None:
        self.keys = list(keys)
        self.on_read = on_read
        self.reads = 0
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def read(self, timeout_ms: int | None = READ_TIMEOUT_MS) -> str | None:
        if self.on_read is not None:
            self.on_read(self.reads)
        self.reads += 1
        if self.cancelled or not self.keys:
            return None
        return self.keys.pop(0)
