from __future__ import annotations

from datetime import datetime, timezone

from fastapi import Request
from fastapi.responses import JSONResponse

from todo_service.models.schemas import Todo, ValidationProblem


class TodoValidationError(Exception):
    """Field-level rejection of a new todo; ``errors`` maps wire field names to messages."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__("; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in errors.items()))
        self.errors = errors


def _as_utc(value: datetime) -> datetime:
    # Offset-less due dates are taken as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def collect_todo_errors(todo: Todo, now: datetime | None = None) -> dict[str, list[str]]:
    now = now or datetime.now(timezone.utc)
    errors: dict[str, list[str]] = {}

    if _as_utc(todo.due_date) < now:
        errors["dueDate"] = ["Cannot have due date in the past"]
    if todo.is_completed:
        errors["isCompleted"] = ["Cannot add complete todo"]

    return errors


def validate_new_todo(todo: Todo) -> Todo:
    """Dependency for the create route: runs after body binding, before the handler."""

    errors = collect_todo_errors(todo)
    if errors:
        raise TodoValidationError(errors)
    return todo


async def todo_validation_exception_handler(request: Request, exc: TodoValidationError) -> JSONResponse:
    problem = ValidationProblem(errors=exc.errors)
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(),
        media_type="application/problem+json",
    )
