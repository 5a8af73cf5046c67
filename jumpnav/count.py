"""Numeric count prefix accumulation (``3<C-o>``-style repeat counts)."""

from __future__ import annotations

from typing import Callable

from .timers import Timer, TimerQueue

DEFAULT_COUNT_TIMEOUT_MS = 1000


class CountAccumulator:
    """Pending digit string with an expiry timer.

    A leading ``0`` is not a count digit; it only appends once a count is
    already being built. Every appended digit restarts the expiry timer.
    """

    def __init__(
        self,
        timers: TimerQueue,
        timeout_ms: int = DEFAULT_COUNT_TIMEOUT_MS,
        on_expire: Callable[[], None] | None = None,
    ) -> None:
        self.timers = timers
        self.timeout_ms = timeout_ms
        self.on_expire = on_expire
        self.pending = ""
        self.timer: Timer | None = None

    def accepts(self, key: str) -> bool:
        """Return whether ``key`` should be captured as a count digit."""
        if len(key) != 1 or not ("0" <= key <= "9"):
            return False
        return not (key == "0" and self.pending == "")

    def push(self, digit: str) -> None:
        self.pending += digit
        self._restart_timer()

    def consume(self) -> int:
        """Return the pending count (``1`` when empty) and reset."""
        count = int(self.pending) if self.pending else 1
        self.clear()
        return count

    def clear(self) -> bool:
        """Drop any pending count; return whether one was pending."""
        had_pending = self.pending != ""
        self.pending = ""
        self.cancel_timer()
        return had_pending

    def cancel_timer(self) -> None:
        if self.timer is not None:
            self.timers.cancel(self.timer)
            self.timer = None

    def _restart_timer(self) -> None:
        self.cancel_timer()
        self.timer = self.timers.call_later(self.timeout_ms, self._expire)

    def _expire(self) -> None:
        self.pending = ""
        self.timer = None
        if self.on_expire is not None:
            self.on_expire()
