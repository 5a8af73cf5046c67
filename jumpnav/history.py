"""Jump-list primitives: locations, the bounded jump list, and persistence.

This module intentionally has no UI concerns.
It is the backing store the item provider reads from and ``choose`` writes to.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from . import store

MAX_JUMP_HISTORY = 100
STATE_KEY = "jumplist"


@dataclass(frozen=True)
class JumpLocation:
    """One recorded position: path plus 1-based line and column."""

    path: Path
    line: int = 1
    column: int = 1

    def normalized(self) -> JumpLocation:
        """Return a resolved, 1-based variant safe for persistence/history."""
        try:
            resolved = self.path.expanduser().resolve()
        except Exception:
            resolved = self.path
        return JumpLocation(
            path=resolved,
            line=max(1, self.line),
            column=max(1, self.column),
        )

    @classmethod
    def parse(cls, spec: str) -> JumpLocation:
        """Parse ``PATH[:LINE[:COL]]`` into a normalized location."""
        parts = spec.rsplit(":", 2)
        numbers: list[int] = []
        while len(parts) > 1 and parts[-1].isdigit() and len(numbers) < 2:
            numbers.insert(0, int(parts.pop()))
        path = ":".join(parts)
        if not path:
            raise ValueError(f"invalid location: {spec!r}")
        line = numbers[0] if numbers else 1
        column = numbers[1] if len(numbers) > 1 else 1
        return cls(Path(path), line, column).normalized()


class JumpHistory:
    """Bounded jump list with a movable current position.

    Entries are kept oldest-first. ``current`` always indexes an entry while
    the list is non-empty; entries after it are "newer" (reachable forward).
    """

    def __init__(
        self,
        entries: list[JumpLocation] | None = None,
        current: int | None = None,
        max_entries: int = MAX_JUMP_HISTORY,
    ) -> None:
        self.max_entries = max(1, max_entries)
        self.entries: list[JumpLocation] = list(entries or [])[-self.max_entries :]
        if current is None:
            current = len(self.entries) - 1
        self.current = self._clamp(current)

    def _clamp(self, index: int) -> int:
        if not self.entries:
            return 0
        return max(0, min(index, len(self.entries) - 1))

    def __len__(self) -> int:
        return len(self.entries)

    def record(self, location: JumpLocation) -> None:
        """Append ``location`` as the newest entry and make it current.

        An older entry for the same path and line is dropped first so each
        position appears once.
        """
        location = location.normalized()
        self.entries = [
            entry
            for entry in self.entries
            if not (entry.path == location.path and entry.line == location.line)
        ]
        self.entries.append(location)
        overflow = len(self.entries) - self.max_entries
        if overflow > 0:
            del self.entries[:overflow]
        self.current = len(self.entries) - 1

    def jump(self, offset: int) -> JumpLocation | None:
        """Move the current position by ``offset`` and return the new location."""
        if not self.entries:
            return None
        self.current = self._clamp(self.current + offset)
        return self.entries[self.current]

    def clear(self) -> None:
        self.entries = []
        self.current = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "current": self.current,
            "entries": [
                {"path": str(entry.path), "line": entry.line, "column": entry.column}
                for entry in self.entries
            ],
        }

    @classmethod
    def from_dict(cls, data: object) -> JumpHistory:
        """Build a history from persisted data, dropping malformed entries."""
        if not isinstance(data, dict):
            return cls()
        raw_entries = data.get("entries")
        entries: list[JumpLocation] = []
        if isinstance(raw_entries, list):
            for raw in raw_entries:
                if not isinstance(raw, dict):
                    continue
                raw_path = raw.get("path")
                if not isinstance(raw_path, str) or not raw_path:
                    continue
                entries.append(
                    JumpLocation(
                        path=Path(raw_path),
                        line=_coerce_positive_int(raw.get("line", 1)),
                        column=_coerce_positive_int(raw.get("column", 1)),
                    )
                )
        current = data.get("current")
        if isinstance(current, bool) or not isinstance(current, int):
            current = None
        return cls(entries, current)


def _coerce_positive_int(value: object) -> int:
    """Normalize JSON scalars for line/column numbers, defaulting to ``1``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return 1
    return max(1, value)


def load_history() -> JumpHistory:
    """Load the persisted jump list (empty when missing or malformed)."""
    return JumpHistory.from_dict(store.load_value(STATE_KEY))


def save_history(history: JumpHistory) -> None:
    """Persist the jump list."""
    store.save_value(STATE_KEY, history.to_dict())
