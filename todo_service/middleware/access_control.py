from __future__ import annotations

from typing import Any, Callable

import structlog
from starlette.responses import PlainTextResponse

from todo_service.config import get_settings


class AccessControlMiddleware:
    """Rejects blocked HTTP methods with 403 before routing."""

    def __init__(self, app: Callable[..., Any]) -> None:
        self.app = app

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        settings = get_settings()
        method = scope.get("method")
        if method not in settings.blocked_methods:
            await self.app(scope, receive, send)
            return

        structlog.get_logger("access").warning("access.denied", method=method, path=scope.get("path"))
        response = PlainTextResponse(settings.delete_forbidden_message, status_code=403)
        await response(scope, receive, send)
