"""Task store that delegates to a remote backend speaking the /tasks contract."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from taskboard.client.tasks import TaskApiClient
from taskboard.errors import TaskApiError, TaskNotFoundError, TaskValidationError
from taskboard.models import (
    ALL_STATUSES,
    Task,
    TaskCreate,
    TaskPage,
    TaskPatch,
    check_page_window,
    parse_create,
    parse_patch,
    parse_status_filter,
)


class RemoteTaskStore:
    """Proxy store; validation happens locally before any request is sent."""

    def __init__(self, client: TaskApiClient) -> None:
        self.client = client

    def migrate(self) -> None:
        return None

    def list_tasks(
        self,
        *,
        status: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> TaskPage:
        check_page_window(page, limit)
        wanted = parse_status_filter(status)
        with _translate_errors(None):
            return self.client.list_tasks(page=page, status=wanted or ALL_STATUSES, limit=limit)

    def get_task(self, task_id: str) -> Task:
        with _translate_errors(task_id):
            return self.client.get_task(task_id)

    def create_task(self, payload: TaskCreate | Mapping[str, Any]) -> Task:
        data = parse_create(payload)
        with _translate_errors(None):
            return self.client.create_task(data)

    def update_task(self, task_id: str, patch: TaskPatch | Mapping[str, Any]) -> Task:
        data = parse_patch(patch)
        with _translate_errors(task_id):
            return self.client.update_task(task_id, data)

    def delete_task(self, task_id: str) -> None:
        with _translate_errors(task_id):
            self.client.delete_task(task_id)


@contextmanager
def _translate_errors(task_id: str | None) -> Iterator[None]:
    """Map remote 404/400/422 responses onto the store's error kinds."""
    try:
        yield
    except TaskApiError as exc:
        if exc.status_code == 404 and task_id is not None:
            raise TaskNotFoundError(task_id) from exc
        if exc.status_code in (400, 422):
            details = exc.details if isinstance(exc.details, list) else None
            raise TaskValidationError(str(exc), details) from exc
        raise
