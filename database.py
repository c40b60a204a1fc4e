# database.py
import json
import logging
import os
import tempfile
import threading
from pathlib import Path

import models
from settings import get_settings

logger = logging.getLogger(__name__)


class TodoNotFound(LookupError):
    def __init__(self, todo_id: int) -> None:
        super().__init__(f"todo {todo_id} not found")
        self.todo_id = todo_id


class TodoStore:
    """
    Task list kept as one JSON array in a flat file.

    The file is the single source of truth: every call re-reads it, and every
    mutation rewrites it whole. The read-modify-write cycle runs under a lock
    so concurrent requests in this process cannot lose each other's updates.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    # ---- file I/O ----

    def load(self) -> list:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read todos from %s", self.path)
            return []
        if not isinstance(data, list):
            logger.error("Ignoring %s: top-level value is not a list", self.path)
            return []
        return data

    def save(self, todos: list) -> bool:
        # Write to a temp file next to the target, then rename over it.
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(todos, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
            return True
        except OSError:
            logger.exception("Failed to save todos to %s", self.path)
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
            return False

    @staticmethod
    def _records(todos: list) -> list:
        # Hand-edited files may hold entries that are not task objects
        return [t for t in todos if isinstance(t, dict) and isinstance(t.get("id"), int)]

    @staticmethod
    def _index_of(todos: list, todo_id: int) -> int:
        for i, todo in enumerate(todos):
            if isinstance(todo, dict) and todo.get("id") == todo_id:
                return i
        return -1

    # ---- operations ----

    def list_all(self) -> list:
        return self._records(self.load())

    def get(self, todo_id: int) -> dict:
        todos = self.load()
        idx = self._index_of(todos, todo_id)
        if idx == -1:
            raise TodoNotFound(todo_id)
        return todos[idx]

    def create(self, text: str) -> dict:
        with self._lock:
            todos = self.load()
            highest = max((t["id"] for t in self._records(todos)), default=0)
            todo = models.new_todo(text, floor=highest)
            todos.append(todo)
            self.save(todos)
        logger.info("Created todo id=%s", todo["id"])
        return todo

    def update(self, todo_id: int, fields: dict) -> dict:
        with self._lock:
            todos = self.load()
            idx = self._index_of(todos, todo_id)
            if idx == -1:
                raise TodoNotFound(todo_id)
            todos[idx] = models.merge_fields(todos[idx], fields)
            self.save(todos)
            updated = todos[idx]
        logger.info("Updated todo id=%s fields=%s", todo_id, sorted(fields))
        return updated

    def delete(self, todo_id: int) -> None:
        with self._lock:
            todos = self.load()
            idx = self._index_of(todos, todo_id)
            if idx == -1:
                raise TodoNotFound(todo_id)
            del todos[idx]
            self.save(todos)
        logger.info("Deleted todo id=%s", todo_id)


store = TodoStore(get_settings().data_file)


def get_store():
    yield store
