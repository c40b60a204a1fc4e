# tests/test_client.py

from __future__ import annotations

import httpx
import pytest

from client import TodoClient, TodoState, active_count, render_todos, visible_todos

TODOS = [
    {"id": 1, "text": "buy milk", "completed": True, "createdAt": "2024-01-01T00:00:00.000Z"},
    {"id": 2, "text": "walk dog", "completed": False, "createdAt": "2024-01-01T00:00:01.000Z"},
]


# ---- rendering against plain state snapshots ----


def test_filters_do_not_mutate_state() -> None:
    state = TodoState(todos=list(TODOS), filter="active")

    assert [t["id"] for t in visible_todos(state)] == [2]
    state.filter = "completed"
    assert [t["id"] for t in visible_todos(state)] == [1]
    state.filter = "all"
    assert visible_todos(state) == TODOS
    assert state.todos == TODOS


def test_active_count_ignores_filter() -> None:
    state = TodoState(todos=list(TODOS), filter="completed")
    assert active_count(state) == 1
    assert "1 tasks left" in render_todos(state)


def test_empty_view_shows_message() -> None:
    state = TodoState(todos=[TODOS[1]], filter="completed")

    html = render_todos(state)

    assert '<li class="empty-message">No tasks</li>' in html
    assert "walk dog" not in html


def test_text_is_escaped() -> None:
    state = TodoState(todos=[{"id": 3, "text": "<script>alert(1)</script>", "completed": False}])

    html = render_todos(state)

    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html


# ---- talking to the real app ----


@pytest.fixture()
def todo_client(api) -> TodoClient:
    return TodoClient(http=api)


def test_load_add_toggle_delete(todo_client: TodoClient, api) -> None:
    api.post("/api/todos", json={"text": "existing"})

    assert todo_client.load()
    assert [t["text"] for t in todo_client.state.todos] == ["existing"]

    assert todo_client.add("  walk dog  ")
    added = todo_client.state.todos[-1]
    assert added["text"] == "walk dog"

    assert todo_client.toggle(added["id"])
    assert todo_client.state.todos[-1]["completed"] is True

    assert todo_client.delete(added["id"])
    assert todo_client.state.todos == api.get("/api/todos").json()


def test_blank_add_sends_nothing(todo_client: TodoClient, api) -> None:
    assert todo_client.add("   ") is False
    assert todo_client.state.todos == []
    assert api.get("/api/todos").json() == []


def test_clear_completed_deletes_each(todo_client: TodoClient, api) -> None:
    for text in ("a", "b", "c"):
        todo_client.add(text)
    todo_client.toggle(todo_client.state.todos[0]["id"])
    todo_client.toggle(todo_client.state.todos[2]["id"])

    assert todo_client.clear_completed() == 2

    assert [t["text"] for t in todo_client.state.todos] == ["b"]
    assert [t["text"] for t in api.get("/api/todos").json()] == ["b"]


def test_active_filter_after_scenario(todo_client: TodoClient) -> None:
    todo_client.add("buy milk")
    todo_client.add("walk dog")
    todo_client.toggle(todo_client.state.todos[0]["id"])

    todo_client.set_filter("active")

    html = todo_client.render()
    assert "walk dog" in html
    assert "buy milk" not in html


def test_unknown_filter_rejected(todo_client: TodoClient) -> None:
    with pytest.raises(ValueError):
        todo_client.set_filter("urgent")


def test_server_404_leaves_cache_stale(todo_client: TodoClient, api) -> None:
    todo_client.add("a")
    todo_id = todo_client.state.todos[0]["id"]
    api.delete(f"/api/todos/{todo_id}")

    assert todo_client.toggle(todo_id) is False
    assert todo_client.state.todos[0]["completed"] is False


def test_network_error_is_logged(caplog) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.Client(base_url="http://todo.invalid", transport=httpx.MockTransport(refuse))
    todo_client = TodoClient(http=http)
    todo_client.state.todos = list(TODOS)

    assert todo_client.load() is False
    assert todo_client.delete(1) is False
    assert todo_client.state.todos == TODOS
    assert "Failed to load todos" in caplog.text
