"""Navigator actions: a closed set of handlers keyed by ``Action``.

Every handler has the signature ``(session, count) -> bool`` where the
return value asks the loop to stop.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable

from . import filters
from .selection import get_selection, move_selection

if TYPE_CHECKING:
    from .session import Session

log = logging.getLogger(__name__)


class Action(Enum):
    JUMP_BACK = "jump_back"
    JUMP_FORWARD = "jump_forward"
    JUMP_TO_TOP = "jump_to_top"
    JUMP_TO_BOTTOM = "jump_to_bottom"
    CHOOSE = "choose"
    CHOOSE_IN_SPLIT = "choose_in_split"
    CHOOSE_IN_TABPAGE = "choose_in_tabpage"
    CHOOSE_IN_VSPLIT = "choose_in_vsplit"
    STOP = "stop"
    TOGGLE_PREVIEW = "toggle_preview"
    TOGGLE_FILE_FILTER = "toggle_file_filter"
    TOGGLE_ROOT_FILTER = "toggle_root_filter"
    TOGGLE_SHOW_HIDDEN = "toggle_show_hidden"
    RESET_FILTERS = "reset_filters"
    TOGGLE_HIDDEN = "toggle_hidden"

    @property
    def consumes_count(self) -> bool:
        """Whether the loop resolves the pending count before dispatch."""
        return self is not Action.STOP


Handler = Callable[["Session", int], bool]


def jump_back(session: Session, count: int) -> bool:
    # Items are newest-first, so older entries sit further down the list.
    move_selection(session, count)
    return False


def jump_forward(session: Session, count: int) -> bool:
    move_selection(session, -count)
    return False


def jump_to_top(session: Session, count: int) -> bool:
    move_selection(session, 0, to=1)
    return False


def jump_to_bottom(session: Session, count: int) -> bool:
    if session.items:
        move_selection(session, 0, to=len(session.items))
    return False


def choose(session: Session, count: int) -> bool:
    return session.choose_with_action(None)


def choose_in_split(session: Session, count: int) -> bool:
    return session.choose_with_action("split")


def choose_in_tabpage(session: Session, count: int) -> bool:
    return session.choose_with_action("tab")


def choose_in_vsplit(session: Session, count: int) -> bool:
    return session.choose_with_action("vsplit")


def stop(session: Session, count: int) -> bool:
    """Clear a pending count if there is one; otherwise close the navigator."""
    if session.count.clear():
        log.debug("stop: cleared pending count")
        session.display.render(session)
        return False
    return True


def toggle_preview(session: Session, count: int) -> bool:
    if session.view_state == "preview":
        session.display.render_list(session)
    else:
        session.display.render_preview(session)
    return False


def toggle_file_filter(session: Session, count: int) -> bool:
    filters.toggle_file(session.filters)
    session.apply_filters_and_update()
    return False


def toggle_root_filter(session: Session, count: int) -> bool:
    filters.toggle_root(session.filters)
    session.apply_filters_and_update()
    return False


def toggle_show_hidden(session: Session, count: int) -> bool:
    filters.toggle_hidden(session.filters)
    session.apply_filters_and_update()
    return False


def reset_filters(session: Session, count: int) -> bool:
    filters.reset(session.filters)
    session.apply_filters_and_update()
    return False


def toggle_hidden(session: Session, count: int) -> bool:
    """Flip the persisted hidden mark of the selection and re-filter."""
    item = get_selection(session)
    if item is None:
        return False

    hidden = session.registry.toggle(item)
    log.debug("toggle_hidden: %s:%s hidden=%s", item.path, item.line, hidden)
    session.registry.mark_items(session.items)
    session.registry.mark_items(session.original_items)
    session.apply_filters_and_update()
    return False


HANDLERS: dict[Action, Handler] = {
    Action.JUMP_BACK: jump_back,
    Action.JUMP_FORWARD: jump_forward,
    Action.JUMP_TO_TOP: jump_to_top,
    Action.JUMP_TO_BOTTOM: jump_to_bottom,
    Action.CHOOSE: choose,
    Action.CHOOSE_IN_SPLIT: choose_in_split,
    Action.CHOOSE_IN_TABPAGE: choose_in_tabpage,
    Action.CHOOSE_IN_VSPLIT: choose_in_vsplit,
    Action.STOP: stop,
    Action.TOGGLE_PREVIEW: toggle_preview,
    Action.TOGGLE_FILE_FILTER: toggle_file_filter,
    Action.TOGGLE_ROOT_FILTER: toggle_root_filter,
    Action.TOGGLE_SHOW_HIDDEN: toggle_show_hidden,
    Action.RESET_FILTERS: reset_filters,
    Action.TOGGLE_HIDDEN: toggle_hidden,
}


def dispatch(action: Action, session: Session, count: int) -> bool:
    return HANDLERS[action](session, count)
