# views.py
#
# Description:
# View state and the query engine. ViewState holds what the user has asked to
# see (page, page size, search, sort, hide-completed, selection) and derive()
# turns the full todo list plus that state into the page shown on screen:
# filter -> sort -> paginate -> resolve selection. Nothing here touches
# storage or the terminal, and nothing is memoised.
#

import locale
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from settings import DEFAULT_PAGE_SIZE
from task_manager import Todo


class SortKey(str, Enum):
    """What the todo list is ordered by."""
    TITLE = "title"
    STATUS = "status"
    CREATED_AT = "created_at"


class SortOrder(str, Enum):
    """Direction of the ordering."""
    ASC = "asc"
    DESC = "desc"


SORT_KEY_LABELS = {
    SortKey.TITLE: "Title",
    SortKey.STATUS: "Status",
    SortKey.CREATED_AT: "Created at",
}

SORT_ORDER_LABELS = {
    SortOrder.ASC: "Ascending",
    SortOrder.DESC: "Descending",
}


@dataclass
class ViewState:
    """
    Session-scoped UI state. Created once with defaults and changed in place
    by the command handlers; never persisted.

    Attributes:
        page: 1-based page number.
        page_size: Number of todos per page, at least 1.
        search: Whitespace-separated search terms, empty for no filter.
        sort_key: Ordering key; CREATED_AT keeps storage order.
        sort_order: ASC, or DESC to reverse the ordered list.
        hide_completed: Drop done todos before anything else.
        selected_id: ID of the selected todo. Only counts while that todo
            is on the visible page.
    """
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search: str = ""
    sort_key: SortKey = SortKey.CREATED_AT
    sort_order: SortOrder = SortOrder.ASC
    hide_completed: bool = False
    selected_id: Optional[int] = None

    @property
    def is_sorted(self) -> bool:
        """True when the ordering differs from the default (created at, ascending)."""
        return self.sort_key != SortKey.CREATED_AT or self.sort_order != SortOrder.ASC

    def reset_sort(self):
        self.sort_key = SortKey.CREATED_AT
        self.sort_order = SortOrder.ASC


@dataclass
class TodoView:
    """The result of one derivation; a snapshot, not a live view."""
    todos: List[Todo]
    filtered: List[Todo]
    total: int
    page: int
    max_page: int
    selected: Optional[Todo] = None

    @property
    def filtered_count(self) -> int:
        return len(self.filtered)

    def todo_at(self, number: int) -> Optional[Todo]:
        """The visible todo at a 1-based page position, or None if out of range."""
        if 1 <= number <= len(self.todos):
            return self.todos[number - 1]
        return None


def filter_todos(todos: List[Todo], search: str = "", hide_completed: bool = False) -> List[Todo]:
    """
    Keeps the todos that should be shown.

    Every whitespace-separated search term has to occur in the title
    (case-insensitive, matched as plain text). An empty search keeps all.
    """
    result = list(todos)
    if hide_completed:
        result = [t for t in result if not t.done]

    terms = [term.casefold() for term in search.split()]
    if terms:
        result = [
            t for t in result
            if all(term in t.title.casefold() for term in terms)
        ]
    return result


def _title_key(todo: Todo):
    return (locale.strxfrm(todo.title.casefold()), locale.strxfrm(todo.title))


def sort_todos(todos: List[Todo], sort_key: SortKey, sort_order: SortOrder) -> List[Todo]:
    """
    Orders the todos.

    CREATED_AT keeps the incoming (storage) order. STATUS puts open todos
    first and breaks ties by creation time. TITLE uses the current locale's
    collation. DESC reverses whatever order the key produced.
    """
    result = list(todos)
    if sort_key == SortKey.STATUS:
        result.sort(key=lambda t: (t.done, t.timestamp))
    elif sort_key == SortKey.TITLE:
        result.sort(key=_title_key)

    if sort_order == SortOrder.DESC:
        result.reverse()
    return result


def max_page(count: int, page_size: int) -> int:
    """Number of pages needed for count todos; always at least 1."""
    return max(1, math.ceil(count / page_size))


def paginate(todos: List[Todo], page: int, page_size: int) -> List[Todo]:
    """The slice of todos on a 1-based page. Out-of-range pages are empty."""
    start = (page - 1) * page_size
    return todos[start:start + page_size]


def resolve_selection(visible: List[Todo], selected_id: Optional[int]) -> Optional[Todo]:
    """The selected todo if it is on the visible page, otherwise None."""
    if selected_id is None:
        return None
    return next((t for t in visible if t.id == selected_id), None)


def derive(todos: List[Todo], state: ViewState) -> TodoView:
    """
    Computes what the user currently sees.

    Args:
        todos: The full list, as loaded from storage.
        state: The current view state. It is not modified.

    Returns:
        A TodoView with the visible page, the full filtered list, the
        unfiltered count, the page bounds and the resolved selection.
    """
    filtered = sort_todos(
        filter_todos(todos, state.search, state.hide_completed),
        state.sort_key,
        state.sort_order,
    )
    visible = paginate(filtered, state.page, state.page_size)
    return TodoView(
        todos=visible,
        filtered=filtered,
        total=len(todos),
        page=state.page,
        max_page=max_page(len(filtered), state.page_size),
        selected=resolve_selection(visible, state.selected_id),
    )
