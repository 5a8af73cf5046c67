"""Key notation normalization and key -> action dispatch table."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass

from .actions import Action

log = logging.getLogger(__name__)

_SPECIAL_KEYS: dict[str, str] = {
    "cr": "ENTER",
    "enter": "ENTER",
    "return": "ENTER",
    "esc": "ESC",
    "tab": "TAB",
    "bs": "BACKSPACE",
    "backspace": "BACKSPACE",
    "space": " ",
    "lt": "<",
    "up": "UP",
    "down": "DOWN",
    "left": "LEFT",
    "right": "RIGHT",
}
# Control characters that terminals cannot distinguish from named keys.
_CTRL_ALIASES: dict[str, str] = {"i": "TAB", "m": "ENTER", "j": "ENTER", "[": "ESC", "h": "BACKSPACE"}
_NOTATION_RE = re.compile(r"^<(?P<body>[^<>]+)>$")


def normalize_key(notation: str) -> str | None:
    """Translate ``<C-o>``-style notation into a ``read_key`` token.

    Returns ``None`` for notation that cannot be produced by a single key
    press (such as multi-key sequences).
    """
    if len(notation) == 1:
        return notation
    match = _NOTATION_RE.match(notation)
    if match is None:
        return None
    body = match.group("body")
    lowered = body.lower()
    if lowered in _SPECIAL_KEYS:
        return _SPECIAL_KEYS[lowered]
    if lowered.startswith("c-") and len(body) == 3:
        letter = lowered[2]
        if letter in _CTRL_ALIASES:
            return _CTRL_ALIASES[letter]
        if "a" <= letter <= "z":
            return f"CTRL_{letter.upper()}"
    return None


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one key token to one action."""

    key: str
    action: Action
    notation: str


class KeyMap:
    """Closed key -> ``Action`` table built from action-name mappings."""

    def __init__(self) -> None:
        self._bindings: dict[str, KeyBinding] = {}

    def register_binding(self, action: Action, notation: str) -> KeyMap:
        """Bind ``notation`` to ``action``, overwriting earlier bindings of that key."""
        key = normalize_key(notation)
        if key is None or key == "":
            log.warning("keymap: cannot bind %r for %s", notation, action.value)
            return self
        self._bindings[key] = KeyBinding(key=key, action=action, notation=notation)
        return self

    def register_bindings(self, mappings: Mapping[str, str]) -> KeyMap:
        """Register ``{action_name: notation}`` pairs and return ``self``."""
        for name, notation in mappings.items():
            self.register_binding(Action(name), notation)
        return self

    def lookup(self, key: str) -> Action | None:
        binding = self._bindings.get(key)
        return binding.action if binding is not None else None

    def bindings(self) -> list[KeyBinding]:
        return list(self._bindings.values())


def build_keymap(mappings: Mapping[str, str]) -> KeyMap:
    return KeyMap().register_bindings(mappings)
