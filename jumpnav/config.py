"""Configuration: defaults, the JSON config file, and validation.

The config file is read defensively (missing or malformed files act as an
empty object). Values that *are* present but have the wrong type raise
``ConfigError``: those are programmer errors and are reported loudly.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "jumpnav"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

VIEW_MODES = ("list", "preview")
LOG_LEVEL_NAMES = ("off", "error", "warn", "info", "debug", "trace")
WINDOW_NUMBER_FIELDS = ("width", "height", "col", "row")

DEFAULT_MAPPINGS: dict[str, str] = {
    # Navigation
    "jump_back": "<C-o>",
    "jump_forward": "<C-i>",
    "jump_to_top": "g",
    "jump_to_bottom": "G",
    # Selection
    "choose": "<CR>",
    "choose_in_split": "<C-s>",
    "choose_in_tabpage": "<C-t>",
    "choose_in_vsplit": "<C-v>",
    # Control
    "stop": "<Esc>",
    "toggle_preview": "p",
    # Filtering (reset when the navigator closes)
    "toggle_file_filter": "f",
    "toggle_root_filter": "c",
    "toggle_show_hidden": ".",
    "reset_filters": "r",
    # Hide management
    "toggle_hidden": "x",
}

DEFAULT_OPTIONS: dict[str, object] = {
    "root_only": False,
    "wrap_edges": False,
    "default_view": "preview",
    "count_timeout_ms": 1000,
    "log_level": "off",
    "preview_style": "monokai",
}


class ConfigError(ValueError):
    """Invalid configuration or start options."""


@dataclass(frozen=True)
class Options:
    root_only: bool = False
    wrap_edges: bool = False
    default_view: str = "preview"
    count_timeout_ms: int = 1000
    log_level: str = "off"
    preview_style: str = "monokai"


@dataclass(frozen=True)
class Config:
    """Validated configuration used by sessions."""

    options: Options = field(default_factory=Options)
    mappings: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_MAPPINGS))
    window: object = None


def load_config_file() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def check_type(name: str, value: object, expected: type | tuple[type, ...], allow_none: bool = False) -> None:
    """Raise ``ConfigError`` unless ``value`` is an instance of ``expected``."""
    if value is None and allow_none:
        return
    if isinstance(value, bool) and expected in (int, float, (int, float)):
        raise ConfigError(f"`{name}` should be a number, not bool")
    if not isinstance(value, expected):
        names = expected.__name__ if isinstance(expected, type) else " or ".join(t.__name__ for t in expected)
        raise ConfigError(f"`{name}` should be {names}, not {type(value).__name__}")


def check_window_config(window_config: Mapping[str, object]) -> None:
    """Type-check the geometry fields of a window override mapping."""
    for name in WINDOW_NUMBER_FIELDS:
        if name in window_config:
            check_type(f"window.config.{name}", window_config[name], int)
    if "border" in window_config:
        check_type("window.config.border", window_config["border"], str)


def _merge(base: dict[str, object], overrides: Mapping[str, object]) -> dict[str, object]:
    """Deep-merge ``overrides`` into a copy of ``base`` (mappings merge, others replace)."""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged


def defaults() -> dict[str, object]:
    return {
        "options": dict(DEFAULT_OPTIONS),
        "mappings": dict(DEFAULT_MAPPINGS),
        "window": {"config": None},
    }


def setup(config: Mapping[str, object] | None = None) -> Config:
    """Validate ``config`` merged over the defaults and return a ``Config``."""
    check_type("config", config, Mapping, allow_none=True)
    raw = _merge(defaults(), config or {})

    mappings = raw["mappings"]
    check_type("mappings", mappings, Mapping)
    for name, key in mappings.items():
        if name not in DEFAULT_MAPPINGS:
            raise ConfigError(f"unknown action in `mappings`: {name!r}")
        check_type(f"mappings.{name}", key, str)

    options = raw["options"]
    check_type("options", options, Mapping)
    for name in options:
        if name not in DEFAULT_OPTIONS:
            raise ConfigError(f"unknown option: {name!r}")
    check_type("options.root_only", options["root_only"], bool)
    check_type("options.wrap_edges", options["wrap_edges"], bool)
    check_type("options.default_view", options["default_view"], str)
    if options["default_view"] not in VIEW_MODES:
        raise ConfigError(f'`options.default_view` must be "list" or "preview", got {options["default_view"]!r}')
    check_type("options.count_timeout_ms", options["count_timeout_ms"], (int, float))
    check_type("options.log_level", options["log_level"], str)
    if options["log_level"] not in LOG_LEVEL_NAMES:
        raise ConfigError(
            f"`options.log_level` must be one of: {', '.join(LOG_LEVEL_NAMES)}, got {options['log_level']!r}"
        )
    check_type("options.preview_style", options["preview_style"], str)

    window = raw["window"]
    check_type("window", window, Mapping)
    window_config = window.get("config")
    if not (window_config is None or isinstance(window_config, Mapping) or callable(window_config)):
        raise ConfigError(f"`window.config` should be mapping or callable, not {type(window_config).__name__}")
    if isinstance(window_config, Mapping):
        check_window_config(window_config)

    return Config(
        options=Options(
            root_only=options["root_only"],
            wrap_edges=options["wrap_edges"],
            default_view=options["default_view"],
            count_timeout_ms=int(options["count_timeout_ms"]),
            log_level=options["log_level"],
            preview_style=options["preview_style"],
        ),
        mappings=dict(mappings),
        window=window_config,
    )


def load() -> Config:
    """Validate the on-disk config file merged over defaults."""
    return setup(load_config_file())
