from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Todo(BaseModel):
    """A single task. Frozen: todos are created and deleted, never updated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    due_date: datetime = Field(alias="dueDate")
    is_completed: bool = Field(default=False, alias="isCompleted")


class ValidationProblem(BaseModel):
    type: str = "https://tools.ietf.org/html/rfc9110#section-15.5.21"
    title: str = "One or more validation errors occurred."
    status: int = 422
    errors: dict[str, list[str]]


class Problem(BaseModel):
    type: str = "about:blank"
    title: str
    status: int
    detail: str | None = None
