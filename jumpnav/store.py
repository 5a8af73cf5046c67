"""Persistent JSON state helpers.

Stores the jump list and the hidden-item key string between runs.
All access is defensive: malformed or missing state falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_state_dir

APP_NAME = "jumpnav"
STATE_FILENAME = "state.json"
STATE_PATH = Path(user_state_dir(APP_NAME, appauthor=False)) / STATE_FILENAME


def load_state() -> dict[str, object]:
    """Load the persisted JSON state object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(STATE_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_state(data: dict[str, object]) -> None:
    """Persist state data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when state cannot be written.
    """
    try:
        STATE_PATH.parent.mkdir(parents=True, exist_ok=True)
        STATE_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def load_value(key: str) -> object:
    """Return one top-level state value, or ``None`` when absent."""
    return load_state().get(key)


def save_value(key: str, value: object) -> None:
    """Read-modify-write one top-level state value."""
    state = load_state()
    state[key] = value
    save_state(state)
