"""Hidden-item registry.

Hidden marks are a set of ``path:line:column`` keys persisted as one
newline-joined string in a key-value slot. The set is re-read on every
operation and written back in full on every toggle.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from . import store
from .items import JumpItem

log = logging.getLogger(__name__)

STATE_KEY = "hidden_items"


class KeyValueSlot(Protocol):
    """Persistent string slot backing the registry."""

    def load(self) -> str: ...

    def save(self, value: str) -> None: ...


class StateFileSlot:
    """Slot stored under one key of the JSON state file."""

    def __init__(self, key: str = STATE_KEY) -> None:
        self.key = key

    def load(self) -> str:
        value = store.load_value(self.key)
        return value if isinstance(value, str) else ""

    def save(self, value: str) -> None:
        store.save_value(self.key, value)


class MemorySlot:
    """Process-local slot, used for tests and ephemeral sessions."""

    def __init__(self, value: str = "") -> None:
        self.value = value

    def load(self) -> str:
        return self.value

    def save(self, value: str) -> None:
        self.value = value


def get_key(item: JumpItem) -> str:
    return f"{item.path}:{item.line}:{item.column}"


class HiddenRegistry:
    """Toggle, query and bulk-mark hidden jump items."""

    def __init__(self, slot: KeyValueSlot | None = None) -> None:
        self.slot: KeyValueSlot = slot if slot is not None else StateFileSlot()

    def load(self) -> set[str]:
        """Deserialize the slot into a key set (blank lines ignored)."""
        raw = self.slot.load()
        if not raw:
            return set()
        return {key for key in raw.split("\n") if key}

    def save(self, hidden: Iterable[str]) -> None:
        self.slot.save("\n".join(sorted(hidden)))

    def is_hidden(self, item: JumpItem) -> bool:
        return get_key(item) in self.load()

    def toggle(self, item: JumpItem) -> bool:
        """Flip the item's hidden mark, persist, and return the new status."""
        hidden = self.load()
        key = get_key(item)
        if key in hidden:
            hidden.discard(key)
            new_status = False
        else:
            hidden.add(key)
            new_status = True
        self.save(hidden)
        log.debug("toggle: %s hidden=%s", key, new_status)
        return new_status

    def mark_items(self, items: list[JumpItem] | None) -> list[JumpItem] | None:
        """Set ``hidden`` on each item in place from the persisted set."""
        if not items:
            return items
        hidden = self.load()
        for item in items:
            item.hidden = get_key(item) in hidden
        return items

    def clear(self) -> None:
        self.save(())
