"""FastAPI application wiring for the task service.

Beginner terms used in this file:
- FastAPI app: the main web application object.
- Route/path operation: a function exposed over HTTP (for example, GET /tasks).
- response_model: Pydantic model used to validate/shape API responses.
- Exception handler: turns a raised error into an HTTP response body.
- app.state: a place to store shared runtime objects (settings, storage).
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse

from taskboard import __version__
from taskboard.api.ui import render_homepage
from taskboard.config.settings import Settings, get_settings
from taskboard.errors import (
    TaskNotFoundError,
    TaskValidationError,
    UnexpectedTaskError,
)
from taskboard.models import Task, TaskCreate, TaskPage, TaskPatch, describe_errors
from taskboard.storage.base import TaskStore
from taskboard.storage.factory import build_task_store

T = TypeVar("T")
logger = logging.getLogger(__name__)


def create_app(
    *,
    storage: TaskStore | None = None,
    settings_override: Settings | None = None,
) -> FastAPI:
    """Application factory.

    The configured store is built and migrated on startup, not at import
    time; handlers reach it only through `app.state.storage`. An injected
    store (tests) is wired in immediately.
    """
    settings = settings_override or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        _ensure_runtime_state(app, settings=settings, storage_override=storage)
        yield

    app_lifespan = lifespan if storage is None else None
    app = FastAPI(title=settings.app_name, version=__version__, lifespan=app_lifespan)

    # Keep test paths reliable when lifespan is not executed by the client.
    if storage is not None:
        _ensure_runtime_state(app, settings=settings, storage_override=storage)

    def _storage(request: Request) -> TaskStore:
        if not hasattr(request.app.state, "storage"):
            _ensure_runtime_state(request.app, settings=settings, storage_override=storage)
        return request.app.state.storage

    @app.exception_handler(TaskNotFoundError)
    def handle_not_found(_: Request, exc: TaskNotFoundError) -> JSONResponse:
        logger.info("task_api event=not_found task_id=%s", exc.task_id)
        return JSONResponse(status_code=404, content={"error": "Task not found"})

    @app.exception_handler(TaskValidationError)
    def handle_invalid(_: Request, exc: TaskValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "details": exc.details or [str(exc)]},
        )

    @app.exception_handler(RequestValidationError)
    def handle_request_invalid(_: Request, exc: RequestValidationError) -> JSONResponse:
        errors = describe_errors(exc.errors())
        # An unparseable body is an unexpected failure, not a field-level rejection.
        if any(error["type"] == "json_invalid" for error in errors):
            return JSONResponse(
                status_code=500,
                content={"error": "Malformed request body", "details": errors},
            )
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "details": errors},
        )

    @app.exception_handler(UnexpectedTaskError)
    def handle_unexpected(_: Request, exc: UnexpectedTaskError) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"error": str(exc), "details": exc.details},
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.app_name}

    @app.get("/", response_class=HTMLResponse)
    def home() -> str:
        return render_homepage(app_name=settings.app_name)

    @app.get("/tasks", response_model=TaskPage)
    def list_tasks(
        request: Request,
        status: str | None = Query(None, description="TO_DO, IN_PROGRESS, DONE or all"),
        page: int = Query(1, ge=1, description="1-based page number"),
        limit: int | None = Query(None, ge=1, le=settings.max_page_size),
    ) -> TaskPage:
        page_size = limit or settings.default_page_size
        result = _call_store(
            "fetch tasks",
            _storage(request).list_tasks,
            status=status,
            page=page,
            limit=page_size,
        )
        logger.info(
            "task_api event=listed status=%s page=%s limit=%s returned=%s total=%s",
            status or "all",
            page,
            page_size,
            len(result.tasks),
            result.pagination.total,
        )
        return result

    @app.post("/tasks", response_model=Task, status_code=201)
    def create_task(payload: TaskCreate, request: Request) -> Task:
        task = _call_store("create task", _storage(request).create_task, payload)
        logger.info("task_api event=created task_id=%s status=%s", task.id, task.status)
        return task

    @app.get("/tasks/{task_id}", response_model=Task)
    def get_task(task_id: str, request: Request) -> Task:
        return _call_store("fetch task", _storage(request).get_task, task_id)

    # PUT and PATCH share merge semantics: only supplied fields change.
    @app.put("/tasks/{task_id}", response_model=Task)
    @app.patch("/tasks/{task_id}", response_model=Task)
    def update_task(task_id: str, payload: TaskPatch, request: Request) -> Task:
        task = _call_store("update task", _storage(request).update_task, task_id, payload)
        logger.info(
            "task_api event=updated task_id=%s fields=%s",
            task_id,
            ",".join(sorted(payload.changes())) or "-",
        )
        return task

    @app.delete("/tasks/{task_id}")
    def delete_task(task_id: str, request: Request) -> dict[str, str]:
        _call_store("delete task", _storage(request).delete_task, task_id)
        logger.info("task_api event=deleted task_id=%s", task_id)
        return {"message": "Task deleted successfully"}

    return app


def _ensure_runtime_state(
    app: FastAPI,
    *,
    settings: Settings,
    storage_override: TaskStore | None,
) -> None:
    if not hasattr(app.state, "storage"):
        task_store = storage_override or build_task_store(settings)
        # Ensure backing tables exist before serving requests.
        task_store.migrate()
        app.state.storage = task_store

    if not hasattr(app.state, "settings"):
        app.state.settings = settings


def _call_store(action: str, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a store operation, wrapping anything unexpected for the 500 handler."""
    try:
        return operation(*args, **kwargs)
    except (TaskNotFoundError, TaskValidationError):
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("task_api event=failed action=%s", action)
        raise UnexpectedTaskError(action, exc) from exc


def run() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "taskboard.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


# Module-level app for `uvicorn taskboard.api.main:app`.
app = create_app()
