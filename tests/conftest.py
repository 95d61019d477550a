from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from todo_service.config import get_settings
from todo_service.main import app
from todo_service.services.task_store import InMemoryTaskStore, set_task_store


@pytest.fixture(autouse=True)
def store(monkeypatch: pytest.MonkeyPatch) -> Iterator[InMemoryTaskStore]:
    for name in ("BLOCK_DELETE", "EXPAND_LOCATION_HEADER", "TASKS_REDIRECT_STATUS", "DELETE_FORBIDDEN_MESSAGE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()

    fresh = InMemoryTaskStore()
    set_task_store(fresh)

    yield fresh

    set_task_store(None)
    get_settings.cache_clear()


@pytest.fixture
def configure(monkeypatch: pytest.MonkeyPatch):
    """Set env-driven settings for a single test."""

    def _configure(**env: str) -> None:
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        get_settings.cache_clear()

    return _configure


@pytest.fixture
def make_todo():
    """Build a POST /todos body with a UTC due date relative to now."""

    def _make_todo(todo_id: int = 1, name: str = "A", due_in: timedelta = timedelta(days=1), completed: bool = False) -> dict:
        due = datetime.now(timezone.utc) + due_in
        return {
            "id": todo_id,
            "name": name,
            "dueDate": due.isoformat(),
            "isCompleted": completed,
        }

    return _make_todo


@pytest.fixture
async def api_client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
