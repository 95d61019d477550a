from typing import Any

import pytest
from structlog.testing import capture_logs

from todo_service.middleware.rewrite import TasksRedirectMiddleware, rewrite_tasks_path
from todo_service.observability.middleware import RequestLoggingMiddleware


async def _receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


def _events(logs: list[dict[str, Any]], name: str) -> list[dict[str, Any]]:
    return [entry for entry in logs if entry["event"] == name]


async def test_request_is_traced_start_and_finish(api_client) -> None:
    with capture_logs() as logs:
        resp = await api_client.get("/todos")
    assert resp.status_code == 200

    started = _events(logs, "request.started")
    finished = _events(logs, "request.finished")
    assert len(started) == 1
    assert len(finished) == 1
    assert started[0]["method"] == "GET"
    assert started[0]["path"] == "/todos"
    assert started[0]["at"].endswith("+00:00")
    assert finished[0]["status_code"] == 200
    assert logs.index(started[0]) < logs.index(finished[0])


async def test_forbidden_delete_is_traced_and_logged(api_client) -> None:
    with capture_logs() as logs:
        resp = await api_client.delete("/todos/1")
    assert resp.status_code == 403

    assert _events(logs, "request.finished")[0]["status_code"] == 403
    denied = _events(logs, "access.denied")
    assert denied and denied[0]["method"] == "DELETE"
    assert denied[0]["log_level"] == "warning"


async def test_redirect_happens_before_tracing(api_client) -> None:
    with capture_logs() as logs:
        resp = await api_client.get("/tasks/5")
    assert resp.status_code == 302
    assert _events(logs, "request.started") == []


@pytest.mark.parametrize(
    ("path", "location"),
    [
        ("/tasks/a%3Fb", "/todos/a%3Fb"),
        ("/tasks/a%2Fb", "/todos/a%2Fb"),
        ("/tasks/a%23b", "/todos/a%23b"),
    ],
)
async def test_redirect_keeps_percent_escapes(api_client, path: str, location: str) -> None:
    resp = await api_client.get(path)
    assert resp.status_code == 302
    assert resp.headers["location"] == location


async def test_redirect_reads_raw_path_from_scope() -> None:
    async def downstream(scope, receive, send) -> None:
        raise AssertionError("alias requests never reach the app")

    sent: list[dict[str, Any]] = []

    async def send(message: dict[str, Any]) -> None:
        sent.append(message)

    middleware = TasksRedirectMiddleware(downstream)
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/tasks/a?b",
        "raw_path": b"/tasks/a%3Fb",
        "query_string": b"",
        "headers": [],
    }
    await middleware(scope, _receive, send)

    headers = dict(sent[0]["headers"])
    assert sent[0]["status"] == 302
    assert headers[b"location"] == b"/todos/a%3Fb"


async def test_finished_is_logged_when_downstream_raises() -> None:
    async def failing_app(scope, receive, send) -> None:
        raise RuntimeError("boom")

    sent: list[dict[str, Any]] = []

    async def send(message: dict[str, Any]) -> None:
        sent.append(message)

    middleware = RequestLoggingMiddleware(failing_app)
    scope = {"type": "http", "method": "POST", "path": "/todos", "headers": []}

    with capture_logs() as logs:
        with pytest.raises(RuntimeError):
            await middleware(scope, _receive, send)

    assert [e["event"] for e in logs] == ["request.started", "request.finished"]
    assert logs[1]["status_code"] == 500
    assert sent == []


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/tasks/5", "/todos/5"),
        ("/tasks/a/b", "/todos/a/b"),
        ("/tasks/", "/todos/"),
        ("/tasks", None),
        ("/todos/5", None),
        ("/api/tasks/5", None),
    ],
)
def test_rewrite_tasks_path(path: str, expected: str | None) -> None:
    assert rewrite_tasks_path(path) == expected
