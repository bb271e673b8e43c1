import io

import pytest
from rich.console import Console

from storage import JsonStorage
from task_manager import Todo, TodoManager
from terminal import Terminal
from ui import App


def make_todo(todo_id, title, done=False, minute=None):
    minute = todo_id if minute is None else minute
    return Todo(
        id=todo_id,
        title=title,
        timestamp=f"2025-01-01T12:{minute:02d}:00.000Z",
        done=done,
    )


@pytest.fixture
def storage(tmp_path):
    return JsonStorage(str(tmp_path / "todos.json"))


@pytest.fixture
def manager(storage):
    return TodoManager(storage)


@pytest.fixture
def seed(manager):
    """Writes todos straight to storage, bypassing add_todo's timestamps."""
    def _seed(*todos):
        manager.save_todos(list(todos))
        return list(todos)
    return _seed


@pytest.fixture
def make_app(manager):
    """Builds an App whose input is the given script and whose output is captured."""
    def _make_app(script="", page_size=10):
        output = io.StringIO()
        console = Console(file=output, width=200, color_system=None, highlight=False)
        terminal = Terminal(console=console, stdin=io.StringIO(script))
        app = App(manager, terminal, page_size=page_size)
        app.output = output
        return app
    return _make_app
