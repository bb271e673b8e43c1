# keybindings.py
#
# Description:
# This file defines the commands and keybindings for the application.
# Which keys are offered depends on the current view: available_bindings()
# is the single place that decides it, and its result is also what the next
# key read is validated against.
#

from enum import Enum
from typing import List, Optional, Sequence

from textual.binding import Binding

from views import SortKey, SortOrder, TodoView, ViewState


class Command(str, Enum):
    """Every action the session loop can dispatch. Values are binding actions."""
    QUIT = "quit"
    LIST = "list"
    ADD = "add"
    REORDER = "reorder"
    TOGGLE_HIDE = "toggle_hide"
    PAGE_SIZE = "page_size"
    PREVIOUS_PAGE = "previous_page"
    NEXT_PAGE = "next_page"
    SEARCH = "search"
    SELECT = "select"
    TOGGLE_DONE = "toggle_done"
    DELETE = "delete"
    EDIT = "edit"


# Choices offered while reordering
SORT_KEY_BINDINGS = [
    Binding("t", SortKey.TITLE.value, "Title"),
    Binding("s", SortKey.STATUS.value, "Status"),
    Binding("c", SortKey.CREATED_AT.value, "Created at"),
]

SORT_ORDER_BINDINGS = [
    Binding("a", SortOrder.ASC.value, "Ascending"),
    Binding("d", SortOrder.DESC.value, "Descending"),
]


def selected_bindings(view: TodoView) -> List[Binding]:
    """Bindings offered while a todo is selected."""
    done_label = "Mark as not done" if view.selected.done else "Mark as done"
    return [
        Binding("s", Command.SELECT.value, "Deselect TODO"),
        Binding("x", Command.TOGGLE_DONE.value, done_label),
        Binding("d", Command.DELETE.value, "Delete TODO"),
        Binding("e", Command.EDIT.value, "Edit TODO"),
    ]


def browse_bindings(state: ViewState, view: TodoView) -> List[Binding]:
    """Bindings offered while nothing is selected."""
    bindings = [
        Binding("q", Command.QUIT.value, "Quit"),
        Binding("l", Command.LIST.value, "List TODOs"),
        Binding("a", Command.ADD.value, "Add TODO"),
        Binding("r", Command.REORDER.value, "Clear sorting" if state.is_sorted else "Reorder TODOs"),
        Binding("z", Command.TOGGLE_HIDE.value, "Show completed" if state.hide_completed else "Hide completed"),
        Binding("w", Command.PAGE_SIZE.value, "Change TODOs per page"),
    ]
    if state.page > 1:
        bindings.append(Binding("c", Command.PREVIOUS_PAGE.value, "Previous page"))
    if state.page < view.max_page:
        bindings.append(Binding("v", Command.NEXT_PAGE.value, "Next page"))
    # Search only needs something to search in, regardless of filters
    if view.total > 0:
        bindings.append(Binding("b", Command.SEARCH.value, "Clear search" if state.search else "Search TODO"))
    if view.todos:
        bindings.append(Binding("s", Command.SELECT.value, "Select TODO"))
    return bindings


def available_bindings(state: ViewState, view: TodoView) -> List[Binding]:
    """
    The command-availability state machine.

    Args:
        state: The current view state.
        view: The view derived from that state.

    Returns:
        The bindings the user may press next, in menu order.
    """
    if view.selected is not None:
        return selected_bindings(view)
    return browse_bindings(state, view)


def find_binding(bindings: Sequence[Binding], key: str) -> Optional[Binding]:
    """Looks a key up among bindings, ignoring case."""
    key = key.lower()
    return next((b for b in bindings if b.key == key), None)


def format_bindings(bindings: Sequence[Binding]) -> str:
    """Menu line, e.g. 'Q - Quit | L - List TODOs'."""
    return " | ".join(f"{b.key.upper()} - {b.description}" for b in bindings)
