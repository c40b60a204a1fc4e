# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import database
from main import app
from settings import Settings, get_settings


@pytest.fixture()
def public_dir(tmp_path: Path) -> Path:
    root = tmp_path / "public"
    root.mkdir()
    (root / "index.html").write_text("<h1>todos</h1>", encoding="utf-8")
    (root / "style.css").write_text("body {}", encoding="utf-8")
    (root / "notes.xyz").write_text("plain", encoding="utf-8")
    return root


@pytest.fixture()
def settings(tmp_path: Path, public_dir: Path) -> Settings:
    return Settings(
        data_file=tmp_path / "todos.json",
        public_dir=public_dir,
        host="127.0.0.1",
        port=3000,
        log_level="DEBUG",
    )


@pytest.fixture()
def store(settings: Settings) -> database.TodoStore:
    return database.TodoStore(settings.data_file)


@pytest.fixture()
def api(store: database.TodoStore, settings: Settings):
    """TestClient wired to a tmp data file and tmp public dir."""
    app.dependency_overrides[database.get_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
