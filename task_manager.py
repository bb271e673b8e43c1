# task_manager.py
#
# Description:
# This file contains the core logic for managing todos. It defines the Todo
# data structure and a TodoManager class that handles the create, toggle,
# edit and delete operations. Every operation reads the full list from
# storage, changes it and writes it back; nothing is cached in memory.
#

import datetime
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with milliseconds, e.g. 2025-01-01T12:00:00.000Z."""
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class Todo:
    """
    Represents a single todo.

    Attributes:
        id: Integer identifier, assigned when the todo is added.
        title: The text of the todo.
        timestamp: ISO-8601 creation time. Sorts chronologically as a string.
        done: Whether the todo has been completed.
    """
    id: int
    title: str
    timestamp: str
    done: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Todo":
        return cls(
            id=data["id"],
            title=data["title"],
            timestamp=data["timestamp"],
            done=data.get("done", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def created_at(self) -> datetime.datetime:
        """The creation time as an aware datetime."""
        return datetime.datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))


class TodoManager:
    """
    Handles all business logic for todos.
    It owns no state of its own; the storage backend is the only source of truth.
    """
    def __init__(self, storage):
        """
        Initializes the TodoManager with a storage backend.

        Args:
            storage: An instance of a storage class (e.g., JsonStorage)
                     that has load() and save() methods.
        """
        self.storage = storage

    def get_todos(self) -> List[Todo]:
        """Returns every todo, in storage (creation) order."""
        return [Todo.from_dict(data) for data in self.storage.load()]

    def save_todos(self, todos: List[Todo]):
        """Saves the complete list to the storage backend."""
        self.storage.save([todo.to_dict() for todo in todos])

    def add_todo(self, title: str) -> Todo:
        """
        Adds a new todo at the end of the list.

        The id is the list length plus one, not the highest id plus one, so
        after deleting the newest todo a later add can reuse an existing id.

        Args:
            title: The title of the new todo.

        Returns:
            The newly created Todo object.
        """
        todos = self.get_todos()
        new_todo = Todo(id=len(todos) + 1, title=title, timestamp=utc_timestamp())
        todos.append(new_todo)
        self.save_todos(todos)
        logger.info("todo_added", todo_id=new_todo.id)
        return new_todo

    def toggle_todo_done(self, todo_id: int) -> Optional[bool]:
        """
        Flips the done flag of a todo.

        Returns:
            The new done value, or None if no todo has that ID.
        """
        todos = self.get_todos()
        todo = next((t for t in todos if t.id == todo_id), None)
        if not todo:
            return None
        todo.done = not todo.done
        self.save_todos(todos)
        logger.info("todo_toggled", todo_id=todo_id, done=todo.done)
        return todo.done

    def edit_todo(self, todo_id: int, title: str) -> bool:
        """Replaces the title of a todo. An empty title is allowed."""
        todos = self.get_todos()
        todo = next((t for t in todos if t.id == todo_id), None)
        if not todo:
            return False
        todo.title = title
        self.save_todos(todos)
        logger.info("todo_edited", todo_id=todo_id)
        return True

    def delete_todo(self, todo_id: int) -> bool:
        """Removes a todo. Returns False if no todo has that ID."""
        todos = self.get_todos()
        todo = next((t for t in todos if t.id == todo_id), None)
        if not todo:
            return False
        # Only the first match goes if ids ever collide
        todos.remove(todo)
        self.save_todos(todos)
        logger.info("todo_deleted", todo_id=todo_id)
        return True
