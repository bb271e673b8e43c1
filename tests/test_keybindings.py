from keybindings import (
    SORT_KEY_BINDINGS,
    Command,
    available_bindings,
    find_binding,
    format_bindings,
)
from tests.conftest import make_todo
from views import SortKey, ViewState, derive


def commands(state, todos):
    return [Command(b.action) for b in available_bindings(state, derive(todos, state))]


def keys(state, todos):
    return {b.key for b in available_bindings(state, derive(todos, state))}


BASE = [Command.QUIT, Command.LIST, Command.ADD, Command.REORDER, Command.TOGGLE_HIDE, Command.PAGE_SIZE]


def test_empty_dataset_offers_base_only():
    assert commands(ViewState(), []) == BASE


def test_search_and_select_need_todos():
    assert commands(ViewState(), [make_todo(1, "a")]) == BASE + [Command.SEARCH, Command.SELECT]


def test_search_offered_even_when_filter_hides_everything():
    state = ViewState(search="zzz")
    assert commands(state, [make_todo(1, "a")]) == BASE + [Command.SEARCH]


def test_paging():
    todos = [make_todo(i, str(i)) for i in range(1, 16)]
    assert Command.NEXT_PAGE in commands(ViewState(page_size=10), todos)
    assert Command.PREVIOUS_PAGE not in commands(ViewState(page_size=10), todos)

    last = commands(ViewState(page=2, page_size=10), todos)
    assert Command.PREVIOUS_PAGE in last
    assert Command.NEXT_PAGE not in last


def test_selected_mode():
    todos = [make_todo(1, "a")]
    state = ViewState(selected_id=1)
    assert commands(state, todos) == [Command.SELECT, Command.TOGGLE_DONE, Command.DELETE, Command.EDIT]
    assert keys(state, todos) == {"s", "x", "d", "e"}


def test_unresolved_selection_falls_back_to_browse():
    todos = [make_todo(1, "a"), make_todo(2, "b")]
    state = ViewState(page_size=1, page=2, selected_id=1)
    assert Command.QUIT in commands(state, todos)
    assert "a" in keys(state, todos)


def test_add_not_offered_while_selected():
    assert "a" not in keys(ViewState(selected_id=1), [make_todo(1, "a")])


def test_labels_follow_state():
    todos = [make_todo(1, "a", done=True)]
    state = ViewState(sort_key=SortKey.STATUS, hide_completed=False, search="a")
    menu = format_bindings(available_bindings(state, derive(todos, state)))
    assert "R - Clear sorting" in menu
    assert "Z - Hide completed" in menu
    assert "B - Clear search" in menu

    state = ViewState(selected_id=1)
    menu = format_bindings(available_bindings(state, derive(todos, state)))
    assert "X - Mark as not done" in menu
    assert "S - Deselect TODO" in menu


def test_find_binding_ignores_case():
    assert find_binding(SORT_KEY_BINDINGS, "T").action == "title"
    assert find_binding(SORT_KEY_BINDINGS, "q") is None
