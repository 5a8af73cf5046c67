"""Public package surface for jumpnav.

``start`` runs the interactive jump-history navigator and blocks until it
closes. ``refresh``, ``is_active`` and ``get_state`` reach the running
session, if any. ``main`` is the CLI entrypoint.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import asdict

from . import config as _config
from . import logs
from .config import Config, ConfigError, check_type
from .display import general_info
from .filters import FilterContext
from .hide import HiddenRegistry
from .history import JumpHistory, JumpLocation, load_history, save_history
from .host import Host, TerminalHost
from .items import JumpItem
from .loop import run_loop
from .selection import get_selection
from .session import ACTIVE, Target, create
from .sources import create_source

log = logging.getLogger(__name__)

_CONFIG_SECTIONS = ("options", "mappings", "window")
_current_config: Config | None = None


def _activate(config: Config) -> Config:
    global _current_config
    _current_config = config
    logs.configure(config.options.log_level)
    log.debug("setup: options=%s", config.options)
    return config


def setup(config: Mapping[str, object] | None = None) -> Config:
    """Validate ``config`` over the defaults and make it the active config."""
    return _activate(_config.setup(config))


def current_config() -> Config:
    """Return the active config, loading the config file on first use."""
    if _current_config is None:
        return _activate(_config.load())
    return _current_config


def _start_config(opts: Mapping[str, object]) -> Config:
    overrides = {key: value for key, value in opts.items() if key in _CONFIG_SECTIONS}
    base = current_config()
    if not overrides:
        return base
    merged = {
        "options": asdict(base.options),
        "mappings": dict(base.mappings),
        "window": {"config": base.window},
    }
    for key, value in overrides.items():
        check_type(key, value, Mapping)
        merged[key] = {**merged[key], **value}
    return _config.setup(merged)


def choose_item(
    item: JumpItem,
    history: JumpHistory | None = None,
    host: Host | None = None,
) -> JumpLocation | None:
    """Move the persisted jump list's current position onto ``item``."""
    log.info("Navigating to %s at %s:%s (offset=%s)", item.path, item.line, item.column, item.offset)
    if item.offset == 0:
        if host is not None:
            host.notify("Already at current position")
        log.info("Already at current position")
        return None

    history = history if history is not None else load_history()
    location = history.jump(item.offset)
    save_history(history)
    return location


def start(
    opts: Mapping[str, object] | None = None,
    host: Host | None = None,
    history: JumpHistory | None = None,
    registry: HiddenRegistry | None = None,
    choose: Callable[[JumpItem, Target], object] | None = None,
) -> JumpItem | None:
    """Run the navigator and return the chosen item (``None`` when aborted).

    ``opts`` accepts ``offset`` (initial target relative to the current
    entry, default ``-1``) plus ``options``/``mappings``/``window`` overrides.
    """
    check_type("opts", opts, Mapping, allow_none=True)
    opts = opts or {}
    offset = opts.get("offset", -1)
    check_type("offset", offset, int)
    config = _start_config(opts)
    logs.configure(config.options.log_level)
    log.info("Starting jumplist navigator")

    if ACTIVE.get() is not None:
        log.warning("start(): navigator already active")
        return None

    if host is None:
        host = TerminalHost.from_std()
    history = history if history is not None else load_history()
    registry = registry if registry is not None else HiddenRegistry()

    source = create_source(
        history,
        registry,
        offset=offset,
        root_only=config.options.root_only,
        root=host.root(),
        wrap_edges=config.options.wrap_edges,
    )
    if source is None:
        host.notify("No jumps available", logging.WARNING)
        return None

    def default_choose(item: JumpItem, target: Target) -> object:
        choose_item(item, history=history, host=host)
        return choose(item, target) if choose is not None else None

    source.choose = default_choose

    filter_context = FilterContext.capture(host.original_path(), host.root())
    with host.attached():
        session = create(
            config,
            source,
            host.open_window(config.window),
            registry,
            filter_context,
            target=Target(path=host.original_path()),
            resize=lambda: host.window_config(config.window),
        )
        try:
            session.track_focus(host.has_focus)
            session.set_items(source.items, source.initial_selection)
            item = run_loop(session, host.reader())
        finally:
            session.destroy()

    for error in session.errors:
        host.notify(error, logging.ERROR)
    return item


def refresh() -> None:
    """Recompute the window layout and redraw the active session, if any."""
    session = ACTIVE.get()
    if session is None:
        return
    session.update(update_window=True)


def is_active() -> bool:
    return ACTIVE.get() is not None


def get_state() -> dict[str, object] | None:
    """Snapshot of the active session: items, selection and footer info."""
    session = ACTIVE.get()
    if session is None:
        return None
    return {
        "items": session.items,
        "selection": {"index": session.current_ind, "item": get_selection(session)},
        "general_info": general_info(session).as_dict(),
    }


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "ConfigError",
    "choose_item",
    "get_state",
    "is_active",
    "main",
    "refresh",
    "setup",
    "start",
]
