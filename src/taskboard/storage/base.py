"""Storage interface for the task collection."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from taskboard.models import Task, TaskCreate, TaskPage, TaskPatch


class TaskStore(Protocol):
    def migrate(self) -> None: ...

    def list_tasks(
        self,
        *,
        status: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> TaskPage: ...

    def get_task(self, task_id: str) -> Task: ...

    def create_task(self, payload: TaskCreate | Mapping[str, Any]) -> Task: ...

    def update_task(self, task_id: str, patch: TaskPatch | Mapping[str, Any]) -> Task: ...

    def delete_task(self, task_id: str) -> None: ...
