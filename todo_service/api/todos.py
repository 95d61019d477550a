from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from todo_service.api.validation import validate_new_todo
from todo_service.config import Settings, get_settings
from todo_service.models.schemas import Problem, Todo
from todo_service.services.task_store import AmbiguousTodoError, InMemoryTaskStore, get_task_store

LOCATION_TEMPLATE = "/todos/{id}"

router = APIRouter(tags=["todos"])


@router.get("/todos", response_model=list[Todo])
async def list_todos(store: InMemoryTaskStore = Depends(get_task_store)) -> list[Todo]:
    return store.get_todos()


@router.get("/todos/{todo_id}", response_model=Todo)
async def get_todo(todo_id: int, store: InMemoryTaskStore = Depends(get_task_store)) -> Todo | Response:
    todo = store.get_todo_by_id(todo_id)
    if todo is None:
        return Response(status_code=404)
    return todo


@router.post("/todos", response_model=Todo, status_code=201)
async def create_todo(
    response: Response,
    todo: Todo = Depends(validate_new_todo),
    store: InMemoryTaskStore = Depends(get_task_store),
    settings: Settings = Depends(get_settings),
) -> Todo:
    created = store.add_todo(todo)
    if settings.expand_location_header:
        response.headers["Location"] = LOCATION_TEMPLATE.format(id=created.id)
    else:
        response.headers["Location"] = LOCATION_TEMPLATE
    return created


@router.delete("/todos/{todo_id}", status_code=204)
async def delete_todo(todo_id: int, store: InMemoryTaskStore = Depends(get_task_store)) -> Response:
    store.delete_todo_by_id(todo_id)
    return Response(status_code=204)


async def ambiguous_todo_exception_handler(request: Request, exc: AmbiguousTodoError) -> JSONResponse:
    structlog.get_logger("todos").warning("todo.ambiguous", todo_id=exc.todo_id, count=exc.count)
    problem = Problem(title="Ambiguous todo id", status=409, detail=str(exc))
    return JSONResponse(status_code=409, content=problem.model_dump(), media_type="application/problem+json")
