"""In-memory task store used by the mock API and by tests."""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from taskboard.errors import TaskNotFoundError
from taskboard.models import (
    Task,
    TaskCreate,
    TaskPage,
    TaskPatch,
    build_pagination,
    check_page_window,
    parse_create,
    parse_patch,
    parse_status_filter,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InMemoryTaskStore:
    """Ordered, newest-first task collection for one process lifetime.

    Every operation holds a single lock, so concurrent request handlers never
    observe a half-applied create/update/delete. Records are frozen models;
    callers always receive values, never handles into the collection.
    """

    def __init__(
        self,
        seed: Iterable[Task] = (),
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._lock = threading.Lock()
        self._clock = clock
        self._tasks: list[Task] = list(seed)
        seen: set[str] = set()
        for task in self._tasks:
            if task.id in seen:
                raise ValueError(f"Duplicate seed task id: {task.id}")
            seen.add(task.id)
        # Ids come from a counter that only moves forward, so a deleted id is
        # never handed out again.
        self._ids = itertools.count(_first_free_id(self._tasks))

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
        with self._lock:
            matching = [task for task in self._tasks if wanted is None or task.status == wanted]
        offset = (page - 1) * limit
        return TaskPage(
            tasks=matching[offset : offset + limit],
            pagination=build_pagination(page=page, limit=limit, total=len(matching)),
        )

    def get_task(self, task_id: str) -> Task:
        with self._lock:
            return self._tasks[self._index_of(task_id)]

    def create_task(self, payload: TaskCreate | Mapping[str, Any]) -> Task:
        data = parse_create(payload)
        with self._lock:
            now = self._clock()
            task = Task(
                id=str(next(self._ids)),
                title=data.title,
                description=data.description,
                status=data.status,
                created_at=now,
                updated_at=now,
            )
            self._tasks.insert(0, task)
        logger.info("task_store event=created task_id=%s status=%s", task.id, task.status)
        return task

    def update_task(self, task_id: str, patch: TaskPatch | Mapping[str, Any]) -> Task:
        changes = parse_patch(patch).changes()
        with self._lock:
            index = self._index_of(task_id)
            current = self._tasks[index]
            # Never let a clock step backwards break createdAt <= updatedAt.
            updated_at = max(self._clock(), current.updated_at)
            updated = current.model_copy(update={**changes, "updated_at": updated_at})
            self._tasks[index] = updated
        logger.info(
            "task_store event=updated task_id=%s fields=%s",
            task_id,
            ",".join(sorted(changes)) or "-",
        )
        return updated

    def delete_task(self, task_id: str) -> None:
        with self._lock:
            del self._tasks[self._index_of(task_id)]
        logger.info("task_store event=deleted task_id=%s", task_id)

    def _index_of(self, task_id: str) -> int:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        raise TaskNotFoundError(task_id)


def _first_free_id(tasks: Iterable[Task]) -> int:
    numeric = [int(task.id) for task in tasks if task.id.isdigit()]
    return max(numeric, default=0) + 1
