"""Session controller: per-run navigator state and its lifecycle.

A session is created with its items source, window and collaborators,
mutated by actions while the loop runs, and destroyed exactly once. The
process-wide active session lives in ``ACTIVE``, written only by
``create`` and ``Session.destroy``.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Protocol

from . import filters
from .config import Config, Options
from .count import CountAccumulator
from .display import Display
from .filters import FilterContext, FilterState
from .hide import HiddenRegistry
from .items import JumpItem
from .keymap import KeyMap, build_keymap
from .logs import trace
from .selection import (
    VisibleRange,
    get_selection,
    initial_selection,
    preserve_selection,
    set_selection,
)
from .sources import Source
from .timers import Timer, TimerQueue
from .window import WindowConfig, WindowHandle

log = logging.getLogger(__name__)

FOCUS_CHECK_INTERVAL_MS = 1000


class ActiveSessionRegistry:
    """Holds at most one running session for external callers."""

    def __init__(self) -> None:
        self._session: Session | None = None

    def set(self, session: Session) -> None:
        if self._session is not None and self._session is not session:
            log.warning("active session replaced before it was destroyed")
        self._session = session

    def get(self) -> Session | None:
        return self._session

    def clear(self, session: Session | None = None) -> None:
        if session is None or self._session is session:
            self._session = None


ACTIVE = ActiveSessionRegistry()


@dataclass
class Target:
    """Where a chosen item should be opened."""

    path: str = ""
    layout: str | None = None
    valid: bool = True


class Cancellable(Protocol):
    """Anything the focus check can interrupt (``TerminalInput``, fakes)."""

    def cancel(self) -> None: ...


@dataclass
class Session:
    config: Config
    source: Source
    window: WindowHandle
    registry: HiddenRegistry
    filter_context: FilterContext
    timers: TimerQueue = field(default_factory=TimerQueue)
    display: Display = field(default_factory=Display)
    target: Target = field(default_factory=Target)
    keymap: KeyMap | None = None
    resize: Callable[[], WindowConfig] | None = None

    filters: FilterState = field(default_factory=FilterState)
    items: list[JumpItem] | None = None
    original_items: list[JumpItem] = field(default_factory=list)
    view_state: str = "preview"
    visible_range: VisibleRange = field(default_factory=VisibleRange)
    current_ind: int | None = None

    count: CountAccumulator | None = None
    focus_timer: Timer | None = None
    input: Cancellable | None = None
    in_loop: bool = False
    destroyed: bool = False
    choose_failed: bool = False
    errors: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.view_state = self.config.options.default_view
        if self.keymap is None:
            self.keymap = build_keymap(self.config.mappings)
        if self.count is None:
            self.count = CountAccumulator(
                self.timers,
                timeout_ms=self.config.options.count_timeout_ms,
                on_expire=self._on_count_expired,
            )

    @property
    def options(self) -> Options:
        return self.config.options

    @property
    def pending_count(self) -> str:
        return self.count.pending if self.count is not None else ""

    def _on_count_expired(self) -> None:
        log.debug("count expired")
        if not self.destroyed:
            self.display.render(self)
            self.update()

    def set_items(self, items: list[JumpItem], initial_index: int | None = None) -> None:
        """Store raw items, filter them and place the initial selection."""
        trace(log, "set_items: items=%d initial=%s", len(items), initial_index)
        self.original_items = copy.deepcopy(items)

        self.items = filters.apply(items, self.filters, self.filter_context)
        trace(log, "set_items: filtered=%d", len(self.items))
        if self.items:
            index = initial_selection(items, self.items, initial_index)
            set_selection(self, index)
            set_selection(self, index, force_update=True)
            self.display.render(self)
        else:
            set_selection(self, None)
        self.update()

    def apply_filters_and_update(self) -> None:
        """Re-filter the original items, keep the best selection, and redraw."""
        previous = get_selection(self)
        self.items = filters.apply(self.original_items, self.filters, self.filter_context)
        if self.items:
            set_selection(self, preserve_selection(previous, self.items), force_update=True)
        else:
            set_selection(self, None)
        self.display.render(self)
        self.update()

    def update(self, update_window: bool = False) -> None:
        """Repaint borders and rows; optionally recompute the window geometry."""
        if self.destroyed or not self.window.is_valid():
            return
        if update_window and self.resize is not None:
            self.window.resize(self.resize())
            set_selection(self, self.current_ind, force_update=True)
        self.display.update_border(self)
        self.display.update_lines(self)
        self.display.paint(self)

    def choose_with_action(self, layout: str | None) -> bool:
        """Hand the selection to the source's ``choose`` callback.

        Returns whether the navigator should stop. A callback that raises,
        or returns a falsy value, stops it; a raised error is kept in
        ``errors`` and reported once the session is torn down.
        """
        item = get_selection(self)
        if item is None:
            return True

        if layout and self.target.valid:
            self.target = replace(self.target, layout=layout)

        if self.source.choose is None:
            return True
        try:
            result = self.source.choose(item, self.target)
        except Exception as exc:
            self.choose_failed = True
            self.errors.append(f"choose_with_action(): Error during choose action:\n{exc}")
            log.exception("choose_with_action: choose callback failed")
            return True
        return not result

    def track_focus(self, has_focus: Callable[[], bool]) -> None:
        """Check focus periodically; abort the read or destroy when it is lost."""

        def check() -> None:
            if self.destroyed or has_focus():
                return
            log.debug("focus lost")
            if self.in_loop and self.input is not None:
                self.input.cancel()
                return
            self.destroy()

        self.focus_timer = self.timers.call_every(FOCUS_CHECK_INTERVAL_MS, check)

    def destroy(self) -> None:
        """Cancel timers, close the window and release the active slot; idempotent."""
        if self.destroyed:
            trace(log, "destroy: already destroyed")
            return
        self.destroyed = True
        log.debug("destroy: cleaning up session")
        if self.count is not None:
            self.count.cancel_timer()
        self.timers.cancel(self.focus_timer)
        self.focus_timer = None
        self.timers.cancel_all()
        try:
            self.window.close()
        except Exception:
            log.debug("destroy: window close failed", exc_info=True)
        ACTIVE.clear(self)
        log.info("Navigator closed")


def create(
    config: Config,
    source: Source,
    window: WindowHandle,
    registry: HiddenRegistry,
    filter_context: FilterContext,
    **kwargs: object,
) -> Session:
    """Build a session without items and make it the active one."""
    log.debug("create: source=%s items=%d", source.name, len(source.items))
    session = Session(
        config=config,
        source=source,
        window=window,
        registry=registry,
        filter_context=filter_context,
        **kwargs,
    )
    ACTIVE.set(session)
    return session
