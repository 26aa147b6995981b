"""Shared fixtures: a store, a renderer and an app on a temporary SQLite file."""

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from todo_server.core.config import Settings
from todo_server.main import create_app
from todo_server.persistence.db import build_engine, build_session_factory, init_db
from todo_server.services.fragments import FragmentRenderer
from todo_server.services.task_store import TaskStore
from todo_server.services.todo_service import TodoService

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "todo_server" / "www" / "templates"


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'todo.db'}"


@pytest.fixture
def settings(database_url: str) -> Settings:
    return Settings(_env_file=None, DATABASE_URL=database_url, STATIC_BASE="/assets")


@pytest.fixture
def store(database_url: str) -> Iterator[TaskStore]:
    engine = build_engine(database_url)
    init_db(engine)
    yield TaskStore(build_session_factory(engine))
    engine.dispose()


@pytest.fixture
def renderer() -> FragmentRenderer:
    return FragmentRenderer(TEMPLATES_DIR)


@pytest.fixture
def service(store: TaskStore, renderer: FragmentRenderer) -> TodoService:
    return TodoService(store, renderer, static_base="/assets")


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def app_store(client: TestClient) -> TaskStore:
    """The store the running app writes to."""
    return client.app.state.task_store
