# client.py
"""
Python client for the todo API.

Mirrors what the browser page does: keep a local copy of the list, send every
change to the server, and patch the local copy only with what the server
answers. A failed request is logged and the local copy is left as it was.
"""

import html
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

logger = logging.getLogger(__name__)

API_PATH = "/api/todos"
FILTERS = ("all", "active", "completed")
EMPTY_MESSAGE = "No tasks"


@dataclass
class TodoState:
    todos: List[dict] = field(default_factory=list)
    filter: str = "all"


def visible_todos(state: TodoState) -> List[dict]:
    if state.filter == "active":
        return [t for t in state.todos if not t.get("completed")]
    if state.filter == "completed":
        return [t for t in state.todos if t.get("completed")]
    return list(state.todos)


def active_count(state: TodoState) -> int:
    # Always counted over the whole list, whatever the filter
    return sum(1 for t in state.todos if not t.get("completed"))


def render_todos(state: TodoState) -> str:
    items = visible_todos(state)
    lines = ['<ul class="todo-list">']
    if not items:
        lines.append(f'  <li class="empty-message">{EMPTY_MESSAGE}</li>')
    for todo in items:
        done = bool(todo.get("completed"))
        todo_id = html.escape(str(todo.get("id")))
        lines.append(
            f'  <li class="todo-item{" completed" if done else ""}" data-id="{todo_id}">'
            f'<input type="checkbox" class="todo-checkbox"{" checked" if done else ""}>'
            f'<span class="todo-text">{html.escape(str(todo.get("text", "")))}</span>'
            '<button class="todo-delete">Delete</button></li>'
        )
    lines.append("</ul>")
    lines.append(f'<span class="todo-count">{active_count(state)} tasks left</span>')
    return "\n".join(lines)


class TodoClient:
    def __init__(self, base_url: str = "http://localhost:3000", http: Optional[httpx.Client] = None) -> None:
        self.http = http or httpx.Client(base_url=base_url)
        self.state = TodoState()

    def close(self) -> None:
        self.http.close()

    def _find(self, todo_id: int) -> Optional[dict]:
        for todo in self.state.todos:
            if todo.get("id") == todo_id:
                return todo
        return None

    def load(self) -> bool:
        try:
            resp = self.http.get(API_PATH)
            resp.raise_for_status()
            todos = resp.json()
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to load todos")
            return False
        self.state.todos = list(todos)
        return True

    def add(self, text: str) -> bool:
        text = text.strip()
        if not text:
            return False
        try:
            resp = self.http.post(API_PATH, json={"text": text})
            resp.raise_for_status()
            created = resp.json()
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to add todo")
            return False
        self.state.todos.append(created)
        return True

    def toggle(self, todo_id: int) -> bool:
        todo = self._find(todo_id)
        if todo is None:
            return False
        try:
            resp = self.http.put(f"{API_PATH}/{todo_id}", json={"completed": not todo.get("completed")})
            resp.raise_for_status()
            updated = resp.json()
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to update todo %s", todo_id)
            return False
        self.state.todos = [updated if t.get("id") == todo_id else t for t in self.state.todos]
        return True

    def delete(self, todo_id: int) -> bool:
        try:
            resp = self.http.delete(f"{API_PATH}/{todo_id}")
            resp.raise_for_status()
        except httpx.HTTPError:
            logger.exception("Failed to delete todo %s", todo_id)
            return False
        self.state.todos = [t for t in self.state.todos if t.get("id") != todo_id]
        return True

    def clear_completed(self) -> int:
        """Delete completed todos one request at a time. Returns how many went."""
        removed = 0
        for todo in [t for t in self.state.todos if t.get("completed")]:
            if self.delete(todo["id"]):
                removed += 1
        return removed

    def set_filter(self, name: str) -> None:
        if name not in FILTERS:
            raise ValueError(f"unknown filter: {name!r}")
        self.state.filter = name

    def render(self) -> str:
        return render_todos(self.state)
