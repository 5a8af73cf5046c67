from __future__ import annotations

import unittest
from unittest import mock

from jumpnav.config import ConfigError
from jumpnav.window import Frame, MemoryWindow, TerminalWindow, WindowConfig, compute_config


class ComputeConfigTests(unittest.TestCase):
    def test_golden_ratio_defaults(self) -> None:
        config = compute_config(None, columns=100, lines=40)
        self.assertEqual((config.width, config.height), (61, 24))
        self.assertEqual((config.col, config.row), (1, 40))
        self.assertEqual(config.border, "single")

    def test_overrides_from_mapping_or_callable(self) -> None:
        config = compute_config({"width": 30, "border": "rounded", "bogus": 1}, columns=100, lines=40)
        self.assertEqual(config.width, 30)
        self.assertEqual(config.border, "rounded")
        self.assertEqual(config.bottom_border, "─")

        config = compute_config(lambda: {"height": 3}, columns=100, lines=40)
        self.assertEqual(config.height, 3)

    def test_sizes_are_clamped_to_terminal(self) -> None:
        config = compute_config({"width": 500, "height": 0, "border": "wavy"}, columns=20, lines=10)
        self.assertEqual(config.width, 18)
        self.assertEqual(config.height, 1)
        self.assertEqual(config.border, "single")

    def test_callable_overrides_are_type_checked(self) -> None:
        for factory in (lambda: {"height": "tall"}, lambda: 5):
            with self.subTest(factory=factory):
                with self.assertRaises(ConfigError):
                    compute_config(factory, columns=100, lines=40)

    def test_tiny_terminal(self) -> None:
        config = compute_config(None, columns=1, lines=1)
        self.assertEqual((config.width, config.height), (1, 1))


class MemoryWindowTests(unittest.TestCase):
    def test_paint_resize_close(self) -> None:
        window = MemoryWindow()
        self.assertEqual((window.width, window.height), (60, 10))

        window.paint(Frame(title="t", rows=["a"], current_row=0))
        self.assertEqual(window.frame.rows, ["a"])
        self.assertEqual(window.paint_count, 1)

        window.resize(WindowConfig(width=20, height=4))
        self.assertEqual(window.height, 4)

        window.close()
        window.paint(Frame(rows=["b"]))
        self.assertFalse(window.is_valid())
        self.assertEqual(window.frame.rows, ["a"])


class TerminalWindowTests(unittest.TestCase):
    def setUp(self) -> None:
        self.writes: list[bytes] = []
        patcher = mock.patch("jumpnav.window.os.write", side_effect=self._write)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.window = TerminalWindow(1, WindowConfig(width=10, height=2, col=1, row=10))

    def _write(self, fd: int, payload: bytes) -> int:
        self.writes.append(payload)
        return len(payload)

    def test_paint_draws_border_rows_and_highlight(self) -> None:
        self.window.paint(Frame(title="title", rows=["one", "two"], current_row=1, footer="foot"))

        out = self.writes[-1].decode("utf-8")
        self.assertIn("\x1b[7;1H┌title─────┐", out)
        self.assertIn("\x1b[8;1H│one       \x1b[0m│", out)
        self.assertIn("\x1b[9;1H│\x1b[7mtwo       \x1b[0m│", out)
        self.assertIn("\x1b[10;1H└foot──────┘", out)
        self.assertEqual(self.window.paint_count, 1)

    def test_long_rows_are_clipped(self) -> None:
        self.window.paint(Frame(rows=["abcdefghijklmnop"]))
        out = self.writes[-1].decode("utf-8")
        self.assertIn("│abcdefghij\x1b[0m│", out)

    def test_close_blanks_area_once(self) -> None:
        self.window.close()
        self.window.close()
        self.window.paint(Frame(rows=["x"]))

        self.assertEqual(len(self.writes), 1)
        self.assertEqual(self.writes[0].decode("utf-8").count(" " * 12), 4)
        self.assertFalse(self.window.is_valid())

    def test_write_failure_invalidates_window(self) -> None:
        with mock.patch("jumpnav.window.os.write", side_effect=OSError("closed")):
            self.window.paint(Frame(rows=["x"]))
        self.assertFalse(self.window.is_valid())


if __name__ == "__main__":
    unittest.main()
