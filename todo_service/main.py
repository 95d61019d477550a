from fastapi import FastAPI

from todo_service.api.todos import ambiguous_todo_exception_handler
from todo_service.api.todos import router as todos_router
from todo_service.api.validation import TodoValidationError, todo_validation_exception_handler
from todo_service.config import get_settings
from todo_service.middleware.access_control import AccessControlMiddleware
from todo_service.middleware.rewrite import TasksRedirectMiddleware
from todo_service.observability.logging import configure_logging
from todo_service.observability.middleware import RequestLoggingMiddleware
from todo_service.services.task_store import AmbiguousTodoError


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(level=settings.log_level, json=settings.log_json)

    app = FastAPI(title=settings.app_name, version="0.1.0")
    app.include_router(todos_router)
    app.add_exception_handler(TodoValidationError, todo_validation_exception_handler)
    app.add_exception_handler(AmbiguousTodoError, ambiguous_todo_exception_handler)

    # Last added runs first: redirect -> logging -> access control -> router.
    app.add_middleware(AccessControlMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(TasksRedirectMiddleware)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
