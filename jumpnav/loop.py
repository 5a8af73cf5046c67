"""Read-dispatch loop driving one navigator session."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from .actions import Action, dispatch
from .input import READ_TIMEOUT_MS
from .items import JumpItem
from .logs import trace
from .selection import get_selection
from .session import Session

log = logging.getLogger(__name__)

LOOP_MAX_ITERATIONS = 1_000_000


class LoopState(Enum):
    RUNNING = "running"
    ABORTED = "aborted"
    STOPPED = "stopped"


class KeyReader(Protocol):
    def read(self, timeout_ms: int | None = ...) -> str | None: ...

    def cancel(self) -> None: ...


def handle_key(session: Session, key: str) -> LoopState:
    """Route one key: count digits, mapped actions, or a count reset."""
    if session.count.accepts(key):
        session.count.push(key)
        trace(log, "handle_key: pending count=%s", session.count.pending)
        return LoopState.RUNNING

    action = session.keymap.lookup(key)
    if action is None:
        trace(log, "handle_key: unmapped key %r", key)
        session.count.clear()
        return LoopState.RUNNING

    count = session.count.consume() if action.consumes_count else 1
    log.debug("handle_key: %s count=%d", action.value, count)
    if not dispatch(action, session, count):
        return LoopState.RUNNING
    return LoopState.ABORTED if action is Action.STOP else LoopState.STOPPED


def run_loop(session: Session, reader: KeyReader, timeout_ms: int = READ_TIMEOUT_MS) -> JumpItem | None:
    """Drive ``session`` until it stops or aborts, then destroy it.

    Returns the selected item when an action stopped the loop successfully,
    ``None`` on abort, on ``stop`` and after a failed choose.
    """
    state = LoopState.RUNNING
    item: JumpItem | None = None
    session.input = reader
    session.in_loop = True
    # Idle timeouts leave the frame as it is; keys and fired timers repaint.
    dirty = True
    try:
        for _ in range(LOOP_MAX_ITERATIONS):
            if session.destroyed:
                state = LoopState.ABORTED
                break
            if dirty:
                session.update()

            key = reader.read(timeout_ms)
            fired = session.timers.run_due()
            if key is None or session.destroyed:
                state = LoopState.ABORTED
                break
            if key == "":
                dirty = fired > 0
                continue

            state = handle_key(session, key)
            dirty = True
            if state is not LoopState.RUNNING:
                break
        else:
            log.warning("run_loop: iteration limit reached")
            state = LoopState.ABORTED

        log.debug("run_loop: finished state=%s", state.value)
        if state is LoopState.STOPPED and not session.choose_failed:
            item = get_selection(session)
    finally:
        session.in_loop = False
        session.destroy()
    return item
