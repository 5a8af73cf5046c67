"""Single-threaded timer queue drained by the action loop.

Timers never fire on their own thread: the loop calls ``run_due`` after each
bounded input wait, so timer callbacks are serialized with key handling.
"""

from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True)
class Timer:
    """Handle for one scheduled callback."""

    deadline: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    interval: float | None = field(default=None, compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class TimerQueue:
    """Deadline-ordered callbacks against an injectable monotonic clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._heap: list[Timer] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> Timer:
        """Run ``callback`` once, ``delay_ms`` from now."""
        timer = Timer(self.clock() + delay_ms / 1000.0, next(self._seq), callback)
        heapq.heappush(self._heap, timer)
        return timer

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> Timer:
        """Run ``callback`` every ``interval_ms`` until cancelled."""
        interval = interval_ms / 1000.0
        timer = Timer(self.clock() + interval, next(self._seq), callback, interval=interval)
        heapq.heappush(self._heap, timer)
        return timer

    def cancel(self, timer: Timer | None) -> None:
        if timer is not None:
            timer.cancel()

    def cancel_all(self) -> None:
        for timer in self._heap:
            timer.cancel()
        self._heap.clear()

    def pending(self) -> int:
        return sum(1 for timer in self._heap if not timer.cancelled)

    def run_due(self, now: float | None = None) -> int:
        """Fire every timer whose deadline has passed; return how many ran."""
        if now is None:
            now = self.clock()
        fired = 0
        while self._heap and self._heap[0].deadline <= now:
            timer = heapq.heappop(self._heap)
            if timer.cancelled:
                continue
            if timer.interval is not None:
                timer.deadline = now + timer.interval
                timer.seq = next(self._seq)
                heapq.heappush(self._heap, timer)
            timer.callback()
            fired += 1
        return fired
