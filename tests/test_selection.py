"""Selection model: wrap/clamp movement, scroll window, and preservation."""

from __future__ import annotations

import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

from jumpnav.config import Options
from jumpnav.items import JumpItem
from jumpnav.selection import (
    VisibleRange,
    compute_range,
    get_selection,
    initial_selection,
    move_selection,
    nearest_by_offset,
    preserve_selection,
    set_selection,
    wrap_index,
)
from jumpnav.window import MemoryWindow, WindowConfig


def _item(offset: int, path: str = "/tmp/a.py", line: int | None = None) -> JumpItem:
    return JumpItem(
        Path(path),
        path,
        line if line is not None else 10 + offset,
        1,
        1,
        is_current=offset == 0,
        offset=offset,
    )


def _session(count: int, wrap_edges: bool = False, height: int = 10, view_state: str = "list"):
    return SimpleNamespace(
        items=[_item(offset) for offset in range(count)],
        current_ind=None,
        visible_range=VisibleRange(),
        window=MemoryWindow(WindowConfig(width=40, height=height)),
        options=Options(wrap_edges=wrap_edges),
        view_state=view_state,
        display=mock.Mock(),
    )


class SetSelectionTests(unittest.TestCase):
    def test_empty_items_clear_selection(self) -> None:
        session = _session(0)
        session.current_ind = 4
        session.visible_range = VisibleRange(1, 4)

        set_selection(session, 2, force_update=True)

        self.assertIsNone(session.current_ind)
        self.assertEqual(session.visible_range, VisibleRange())
        self.assertIsNone(get_selection(session))

    def test_index_wraps_modulo_item_count(self) -> None:
        session = _session(5)
        set_selection(session, 7)
        self.assertEqual(session.current_ind, 2)
        set_selection(session, 0)
        self.assertEqual(session.current_ind, 5)
        set_selection(session, None)
        self.assertEqual(session.current_ind, 1)

    def test_visible_range_only_moves_when_selection_leaves_it(self) -> None:
        session = _session(50, height=10)
        set_selection(session, 20)
        self.assertEqual(session.visible_range, VisibleRange(16, 25))

        set_selection(session, 17)
        self.assertEqual(session.visible_range, VisibleRange(16, 25))

        set_selection(session, 17, force_update=True)
        self.assertEqual(session.visible_range, VisibleRange(13, 22))

    def test_compute_range_clamps_to_list_bounds(self) -> None:
        self.assertEqual(compute_range(1, 50, 10), VisibleRange(1, 10))
        self.assertEqual(compute_range(50, 50, 10), VisibleRange(41, 50))
        self.assertEqual(compute_range(2, 3, 10), VisibleRange(1, 3))

    def test_wrap_index(self) -> None:
        self.assertEqual([wrap_index(i, 3) for i in range(-3, 5)], [3, 1, 2, 3, 1, 2, 3, 1])


class MoveSelectionTests(unittest.TestCase):
    def test_clamps_at_top_without_wrap(self) -> None:
        session = _session(3)
        set_selection(session, 1)
        move_selection(session, -1)
        self.assertEqual(session.current_ind, 1)

    def test_clamps_at_bottom_without_wrap(self) -> None:
        session = _session(3)
        set_selection(session, 3)
        move_selection(session, 5)
        self.assertEqual(session.current_ind, 3)

    def test_wraps_from_first_to_last(self) -> None:
        session = _session(3, wrap_edges=True)
        set_selection(session, 1)
        move_selection(session, -1)
        self.assertEqual(session.current_ind, 3)

    def test_wraps_from_last_to_first(self) -> None:
        session = _session(3, wrap_edges=True)
        set_selection(session, 3)
        move_selection(session, 2)
        self.assertEqual(session.current_ind, 1)

    def test_counted_move_wraps_modulo(self) -> None:
        session = _session(5, wrap_edges=True)
        set_selection(session, 1)
        move_selection(session, 7)
        self.assertEqual(session.current_ind, 3)

    def test_wrapping_is_total_for_any_delta(self) -> None:
        for start in range(1, 5):
            for delta in range(-13, 14):
                session = _session(4, wrap_edges=True)
                set_selection(session, start)
                move_selection(session, delta)
                self.assertIn(session.current_ind, range(1, 5), (start, delta))

    def test_absolute_target_ignores_delta(self) -> None:
        session = _session(6)
        set_selection(session, 2)
        move_selection(session, 3, to=6)
        self.assertEqual(session.current_ind, 6)
        move_selection(session, -9, to=1)
        self.assertEqual(session.current_ind, 1)

    def test_preview_mode_refreshes_preview(self) -> None:
        session = _session(3, view_state="preview")
        set_selection(session, 1)
        move_selection(session, 1)
        session.display.render_preview.assert_called_once_with(session)

        list_session = _session(3)
        set_selection(list_session, 1)
        move_selection(list_session, 1)
        list_session.display.render_preview.assert_not_called()

    def test_empty_items_are_a_noop(self) -> None:
        session = _session(0, view_state="preview")
        move_selection(session, 3)
        self.assertIsNone(session.current_ind)
        session.display.render_preview.assert_not_called()


class PreservationTests(unittest.TestCase):
    def test_nearest_by_offset_prefers_first_on_ties(self) -> None:
        items = [_item(-2), _item(0), _item(2)]
        self.assertEqual(nearest_by_offset(items, 1), 2)
        self.assertEqual(nearest_by_offset(items, -1), 1)
        self.assertEqual(nearest_by_offset(items, 5), 3)

    def test_exact_position_match_wins_over_offset(self) -> None:
        previous = _item(3, path="/tmp/b.py", line=40)
        items = [_item(3), _item(-7, path="/tmp/b.py", line=40)]
        self.assertEqual(preserve_selection(previous, items), 2)

    def test_preserve_selection_fallbacks(self) -> None:
        self.assertIsNone(preserve_selection(_item(0), []))
        self.assertEqual(preserve_selection(None, [_item(4), _item(5)]), 1)

    def test_initial_selection_maps_through_filtered_list(self) -> None:
        raw = [_item(-2), _item(-1), _item(0), _item(1), _item(2)]
        filtered = [raw[0], raw[2]]
        self.assertEqual(initial_selection(raw, filtered, 5), 2)

    def test_initial_selection_defaults(self) -> None:
        raw = [_item(-1), _item(0)]
        self.assertIsNone(initial_selection(raw, [], 1))
        self.assertEqual(initial_selection(raw, raw, None), 1)
        self.assertEqual(initial_selection(raw, raw, 9), 2)


if __name__ == "__main__":
    unittest.main()
