# ui.py
#
# Description:
# The interactive session. App renders the available actions, reads one
# validated key, runs the matching handler and re-renders the todo list.
# Handlers change the view state and/or go through the TodoManager; the
# visible page is derived again from storage every time it is needed.
#

from typing import Callable, Dict, List, Optional

import structlog
from rich.text import Text
from textual.binding import Binding

from keybindings import (
    SORT_KEY_BINDINGS,
    SORT_ORDER_BINDINGS,
    Command,
    available_bindings,
    find_binding,
    format_bindings,
)
from settings import DEFAULT_PAGE_SIZE, TIMESTAMP_FORMAT
from task_manager import Todo, TodoManager
from terminal import ANY_TEXT, NON_EMPTY, NUMBER, Terminal
from views import (
    SORT_KEY_LABELS,
    SORT_ORDER_LABELS,
    SortKey,
    SortOrder,
    TodoView,
    ViewState,
    derive,
    max_page,
)

logger = structlog.get_logger(__name__)


def prompt(label: str, style: str) -> Text:
    return Text.assemble((label, style), " ")


def todo_string(todo: Todo) -> str:
    """One-line representation, e.g. `[X] - 2025-01-01 12:00:00 - Buy milk`."""
    timestamp = todo.created_at.astimezone().strftime(TIMESTAMP_FORMAT)
    return f"`[{'X' if todo.done else ' '}] - {timestamp} - {todo.title}`"


class App:
    """The keystroke-driven todo session."""

    def __init__(self, task_manager: TodoManager, terminal: Terminal, page_size: int = DEFAULT_PAGE_SIZE):
        self.task_manager = task_manager
        self.terminal = terminal
        self.state = ViewState(page_size=page_size)
        self.running = True
        self.handlers: Dict[Command, Callable[[], None]] = {
            Command.QUIT: self.quit,
            Command.LIST: self.list_todos,
            Command.ADD: self.add_todo,
            Command.REORDER: self.sort_todos,
            Command.TOGGLE_HIDE: self.toggle_hide_completed,
            Command.PAGE_SIZE: self.change_page_size,
            Command.PREVIOUS_PAGE: self.previous_page,
            Command.NEXT_PAGE: self.next_page,
            Command.SEARCH: self.search_todo,
            Command.SELECT: self.select_todo,
            Command.TOGGLE_DONE: self.toggle_todo_done,
            Command.DELETE: self.delete_todo,
            Command.EDIT: self.edit_todo,
        }

    def current_view(self) -> TodoView:
        """Derives the visible page from a fresh read of storage."""
        return derive(self.task_manager.get_todos(), self.state)

    # --- Session loop ---

    def run(self):
        self.greet()
        self.list_todos()
        while self.running:
            bindings = self.list_actions()
            key = self.terminal.read_key([b.key for b in bindings])
            self.terminal.write(key)
            self.terminal.break_line(2)
            self.handle_input(key, bindings)

    def handle_input(self, key: str, bindings: List[Binding]):
        """Runs the handler bound to key, then re-renders the list."""
        binding = find_binding(bindings, key)
        if binding is None:
            self.terminal.say("Invalid action", "red")
            return
        command = Command(binding.action)
        logger.debug("command", command=command.value)
        self.handlers[command]()
        if self.running and command != Command.LIST:
            self.list_todos()

    # --- Rendering ---

    def greet(self):
        self.terminal.print_title("=", "green", divider="=")
        self.terminal.print_title("Welcome to TODO CLI", "green")
        self.terminal.print_title("=", "green", divider="=")

    def quit(self):
        self.terminal.say("See you soon!", "green")
        self.terminal.say("Exiting...", "green")
        self.running = False

    def list_actions(self) -> List[Binding]:
        """Prints the actions available right now and returns their bindings."""
        self.terminal.break_line()
        self.terminal.print_title("Actions", "red")

        view = self.current_view()
        if view.selected is not None:
            self.terminal.say(f"Selected TODO: {todo_string(view.selected)}", "yellow")

        bindings = available_bindings(self.state, view)
        self.terminal.say(format_bindings(bindings), "red")
        return bindings

    def list_todos(self):
        self.terminal.break_line()
        self.terminal.print_title("TODOs", "yellow")

        view = self.current_view()
        if self.state.search:
            self.terminal.say(Text.assemble(("Searching for:", "blue"), " ", self.state.search))
        if self.state.hide_completed:
            self.terminal.say("(Hiding completed)", "blue")
        if self.state.is_sorted:
            self.terminal.say(Text.assemble(
                ("Sorted by:", "magenta"),
                f" {SORT_KEY_LABELS[self.state.sort_key]} - {SORT_ORDER_LABELS[self.state.sort_order]}",
            ))

        self.terminal.say(f"Page {view.page}/{view.max_page}.", "cyan")
        filtered_from = f" filtered from {view.total}" if self.state.search else ""
        self.terminal.say(
            f"Showing {len(view.todos)}/{view.filtered_count} TODOs{filtered_from}.", "cyan"
        )

        for number, todo in enumerate(view.todos, start=1):
            self.terminal.say(f"{number}. {todo_string(todo)}", "yellow")
        if not view.todos:
            self.terminal.say("- No TODOs found", "red")

    # --- Main actions ---

    def add_todo(self):
        title = self.terminal.read_line(NON_EMPTY, prompt("TODO title:", "on green"))
        self.task_manager.add_todo(title)
        self.terminal.say("TODO added successfully!\n", "green")

    def search_todo(self):
        if self.state.search:
            self.state.search = ""
            logger.info("search_cleared")
            self.terminal.say("Search cleared.", "blue")
            return

        self.terminal.print_title("Search TODO", "blue")
        self.state.search = self.terminal.read_line(ANY_TEXT, prompt("Search for:", "on blue"))
        logger.info("search_set", search=self.state.search)

    def toggle_hide_completed(self):
        self.state.hide_completed = not self.state.hide_completed
        logger.info("hide_completed_toggled", hide_completed=self.state.hide_completed)
        self.terminal.say(
            "Hiding completed" if self.state.hide_completed else "Showing completed", "blue"
        )

    def sort_todos(self):
        if self.state.is_sorted:
            self.state.reset_sort()
            logger.info("sort_cleared")
            self.terminal.say("Sorting cleared.", "magenta")
            return

        self.terminal.print_title("Reorder TODOs", "magenta")
        sort_key = self._choose(SORT_KEY_BINDINGS)
        sort_order = self._choose(SORT_ORDER_BINDINGS)
        self.state.sort_key = SortKey(sort_key)
        self.state.sort_order = SortOrder(sort_order)
        logger.info("sort_set", sort_key=sort_key, sort_order=sort_order)

    def _choose(self, bindings: List[Binding]) -> str:
        """Offers a one-key choice between bindings and returns the chosen action."""
        self.terminal.say(format_bindings(bindings), "magenta")
        key = self.terminal.read_key([b.key for b in bindings], prompt(">", "on magenta"))
        self.terminal.write(key)
        self.terminal.break_line()
        return find_binding(bindings, key).action

    def next_page(self):
        self.state.page += 1
        self.terminal.say(f"Page changed to {self.state.page}.", "cyan")

    def previous_page(self):
        self.state.page -= 1
        self.terminal.say(f"Page changed to {self.state.page}.", "cyan")

    def change_page_size(self):
        while True:
            page_size = int(self.terminal.read_line(NUMBER, prompt("TODOs per page:", "on cyan")))
            if page_size >= 1:
                break
            self.terminal.say("Invalid number!", "red")

        self.state.page_size = page_size
        count = self.current_view().filtered_count
        self.state.page = min(max(self.state.page, 1), max_page(count, page_size))
        logger.info("page_size_changed", page_size=page_size, page=self.state.page)

        self.terminal.break_line()
        self.terminal.say(f"TODOs per page changed to {page_size}.", "cyan")

    def select_todo(self):
        if self.current_view().selected is not None:
            self.state.selected_id = None
            self.terminal.say("TODO deselected.", "yellow")
            return

        while True:
            number = int(self.terminal.read_line(NUMBER, prompt("TODO number:", "on yellow")))
            todo = self.current_view().todo_at(number)
            if todo is not None:
                break
            self.terminal.say("TODO not found!", "red")

        self.state.selected_id = todo.id
        self.terminal.break_line()
        self.terminal.say(f"TODO {todo_string(todo)} selected.", "green")

    # --- Selected TODO actions ---

    def _selected(self) -> Optional[Todo]:
        selected = self.current_view().selected
        if selected is None:
            self.terminal.say("No TODO selected", "red")
        return selected

    def toggle_todo_done(self):
        todo = self._selected()
        if todo is None:
            return
        done = self.task_manager.toggle_todo_done(todo.id)
        self.terminal.say(f"TODO marked as {'done' if done else 'not done'}!", "green")

    def edit_todo(self):
        todo = self._selected()
        if todo is None:
            return
        title = self.terminal.read_line(ANY_TEXT, prompt("New TODO title:", "on green"))
        self.task_manager.edit_todo(todo.id, title)
        self.terminal.say("TODO edited successfully!", "green")

    def delete_todo(self):
        todo = self._selected()
        if todo is None:
            return
        self.task_manager.delete_todo(todo.id)
        self.state.selected_id = None
        self.terminal.say("TODO deleted successfully!", "green")
