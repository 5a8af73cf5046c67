from __future__ import annotations

import unittest

from jumpnav.count import CountAccumulator
from jumpnav.timers import TimerQueue


class FakeClock:
    def __init__(self) -> None:
        self.now_ms = 0

    def __call__(self) -> float:
        return self.now_ms / 1000.0

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class TimerQueueTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.timers = TimerQueue(clock=self.clock)
        self.fired: list[str] = []

    def test_call_later_fires_once_after_deadline(self) -> None:
        self.timers.call_later(50, lambda: self.fired.append("a"))
        self.clock.advance(40)
        self.assertEqual(self.timers.run_due(), 0)
        self.clock.advance(20)
        self.assertEqual(self.timers.run_due(), 1)
        self.clock.advance(500)
        self.assertEqual(self.timers.run_due(), 0)
        self.assertEqual(self.fired, ["a"])

    def test_timers_fire_in_deadline_order(self) -> None:
        self.timers.call_later(30, lambda: self.fired.append("late"))
        self.timers.call_later(10, lambda: self.fired.append("early"))
        self.timers.call_later(10, lambda: self.fired.append("early-2"))
        self.clock.advance(40)
        self.timers.run_due()
        self.assertEqual(self.fired, ["early", "early-2", "late"])

    def test_call_every_repeats_until_cancelled(self) -> None:
        timer = self.timers.call_every(100, lambda: self.fired.append("tick"))
        for _ in range(3):
            self.clock.advance(150)
            self.timers.run_due()
        timer.cancel()
        self.clock.advance(100)
        self.timers.run_due()
        self.assertEqual(self.fired, ["tick", "tick", "tick"])

    def test_periodic_callback_may_cancel_itself(self) -> None:
        holder = {}

        def tick() -> None:
            self.fired.append("tick")
            self.timers.cancel(holder["timer"])

        holder["timer"] = self.timers.call_every(10, tick)
        self.clock.advance(15)
        self.timers.run_due()
        self.clock.advance(15)
        self.timers.run_due()
        self.assertEqual(self.fired, ["tick"])
        self.assertEqual(self.timers.pending(), 0)

    def test_cancel_all_drops_everything(self) -> None:
        self.timers.call_later(1, lambda: self.fired.append("x"))
        self.timers.call_every(1, lambda: self.fired.append("y"))
        self.timers.cancel(None)
        self.timers.cancel_all()
        self.clock.advance(10)
        self.assertEqual(self.timers.run_due(), 0)
        self.assertEqual(self.fired, [])


class CountAccumulatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.timers = TimerQueue(clock=self.clock)
        self.expired = 0
        self.count = CountAccumulator(self.timers, timeout_ms=1000, on_expire=self._on_expire)

    def _on_expire(self) -> None:
        self.expired += 1

    def test_leading_zero_is_not_a_count_digit(self) -> None:
        self.assertFalse(self.count.accepts("0"))
        self.assertTrue(self.count.accepts("1"))
        self.count.push("1")
        self.assertTrue(self.count.accepts("0"))
        self.assertFalse(self.count.accepts("a"))
        self.assertFalse(self.count.accepts("CTRL_O"))

    def test_consume_parses_and_resets(self) -> None:
        self.count.push("2")
        self.count.push("5")
        self.assertEqual(self.count.pending, "25")
        self.assertEqual(self.count.consume(), 25)
        self.assertEqual(self.count.pending, "")
        self.assertEqual(self.count.consume(), 1)

    def test_expiry_clears_pending_count_and_notifies(self) -> None:
        self.count.push("3")
        self.clock.advance(900)
        self.timers.run_due()
        self.assertEqual(self.count.pending, "3")
        self.clock.advance(200)
        self.timers.run_due()
        self.assertEqual(self.count.pending, "")
        self.assertEqual(self.expired, 1)

    def test_each_digit_restarts_the_timer(self) -> None:
        self.count.push("1")
        self.clock.advance(800)
        self.count.push("2")
        self.clock.advance(800)
        self.timers.run_due()
        self.assertEqual(self.count.pending, "12")
        self.assertEqual(self.timers.pending(), 1)

    def test_clear_reports_whether_count_was_pending(self) -> None:
        self.assertFalse(self.count.clear())
        self.count.push("4")
        self.assertTrue(self.count.clear())
        self.clock.advance(5000)
        self.timers.run_due()
        self.assertEqual(self.expired, 0)


if __name__ == "__main__":
    unittest.main()
