from __future__ import annotations

from threading import Lock

import structlog

from todo_service.models.schemas import Todo

logger = structlog.get_logger(__name__)


class AmbiguousTodoError(LookupError):
    """More than one stored todo carries the requested id."""

    def __init__(self, todo_id: int, count: int) -> None:
        super().__init__(f"{count} todos share id {todo_id}")
        self.todo_id = todo_id
        self.count = count


class InMemoryTaskStore:
    """Thread-safe, process-local todo collection (lost on restart).

    Ids are caller-supplied and not checked for uniqueness.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._todos: list[Todo] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._todos)

    def add_todo(self, todo: Todo) -> Todo:
        with self._lock:
            self._todos.append(todo)
        logger.info("todo.created", todo_id=todo.id)
        return todo

    def get_todos(self) -> list[Todo]:
        # Snapshot; callers never see the live list.
        with self._lock:
            return list(self._todos)

    def get_todo_by_id(self, todo_id: int) -> Todo | None:
        with self._lock:
            matches = [todo for todo in self._todos if todo.id == todo_id]
        if len(matches) > 1:
            raise AmbiguousTodoError(todo_id, len(matches))
        return matches[0] if matches else None

    def delete_todo_by_id(self, todo_id: int) -> int:
        """Remove every todo with ``todo_id``; returns how many were removed."""

        with self._lock:
            before = len(self._todos)
            self._todos = [todo for todo in self._todos if todo.id != todo_id]
            removed = before - len(self._todos)
        logger.info("todo.deleted", todo_id=todo_id, removed=removed)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._todos = []


_store: InMemoryTaskStore | None = None


def set_task_store(store: InMemoryTaskStore | None) -> None:
    global _store
    _store = store


def get_task_store() -> InMemoryTaskStore:
    global _store
    if _store is None:
        _store = InMemoryTaskStore()
    return _store
