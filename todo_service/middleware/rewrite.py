from __future__ import annotations

import re
from typing import Any, Callable

from starlette.responses import RedirectResponse

from todo_service.config import get_settings

_TASKS_PATH = re.compile(r"^/tasks/(.*)$")


def rewrite_tasks_path(path: str) -> str | None:
    """Map ``/tasks/<rest>`` to ``/todos/<rest>``; None when the path is not an alias."""

    match = _TASKS_PATH.match(path)
    if match is None:
        return None
    return f"/todos/{match.group(1)}"


class TasksRedirectMiddleware:
    """Redirects the legacy ``/tasks/...`` alias to ``/todos/...`` for every method."""

    def __init__(self, app: Callable[..., Any]) -> None:
        self.app = app

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        # raw_path keeps percent-escapes such as %2F and %3F intact.
        raw_path = scope.get("raw_path")
        path = raw_path.decode("latin-1").split("?", 1)[0] if raw_path else scope.get("path", "")
        target = rewrite_tasks_path(path)
        if target is None:
            await self.app(scope, receive, send)
            return

        query = scope.get("query_string", b"").decode("latin-1")
        if query:
            target = f"{target}?{query}"

        response = RedirectResponse(url=target, status_code=get_settings().tasks_redirect_status)
        await response(scope, receive, send)
