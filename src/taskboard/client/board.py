"""List-view controller driven by URL view state.

`TaskBoard` keeps the current view state, the page of tasks last fetched, and
the last user-facing notice. Every state change re-fetches the current page
through the data access layer; nothing is patched locally.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from taskboard.client.tasks import TaskApiClient
from taskboard.client.view_state import ViewState, parse_view_state
from taskboard.errors import TaskApiError
from taskboard.models import TASK_STATUSES, Pagination, Task

logger = logging.getLogger(__name__)

NoticeLevel = Literal["success", "info", "error"]


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str


class TaskBoard:
    def __init__(
        self,
        api: TaskApiClient,
        *,
        query: str | Mapping[str, Any] | None = None,
        page_size: int = 10,
    ) -> None:
        self.api = api
        self.page_size = page_size
        self.state: ViewState = parse_view_state(query)
        self.tasks: list[Task] = []
        self.pagination: Pagination | None = None
        self.notice: Notice | None = None

    @property
    def url(self) -> str:
        return self.state.to_url()

    def refresh(self) -> bool:
        """Fetch the page described by the current state.

        On failure the previous tasks stay visible and an error notice is set.
        """
        try:
            result = self.api.list_tasks(
                page=self.state.page,
                status=self.state.status,
                limit=self.page_size,
            )
        except TaskApiError as exc:
            logger.warning("task_board event=fetch_failed url=%s reason=%s", self.url, exc)
            self.notice = Notice("error", "Failed to fetch tasks. Please try again.")
            return False
        self.tasks = list(result.tasks)
        self.pagination = result.pagination
        return True

    def navigate(self, query: str | Mapping[str, Any] | None) -> bool:
        self.state = parse_view_state(query)
        return self.refresh()

    def filter_by(self, status: str) -> bool:
        self.state = self.state.with_status(status)
        return self.refresh()

    def go_to_page(self, page: int) -> bool:
        self.state = self.state.with_page(page)
        return self.refresh()

    def next_page(self) -> bool:
        if self.pagination is None or not self.pagination.has_next:
            return False
        return self.go_to_page(self.state.page + 1)

    def previous_page(self) -> bool:
        if self.pagination is None or not self.pagination.has_prev:
            return False
        return self.go_to_page(self.state.page - 1)

    def switch_view(self, view: str) -> bool:
        self.state = self.state.with_view(view)
        return self.refresh()

    def delete_task(self, task_id: str) -> bool:
        """Delete, then re-fetch the same page and filter.

        A 404 means another writer already removed the task; the board treats
        that as done.
        """
        try:
            self.api.delete_task(task_id)
        except TaskApiError as exc:
            if exc.status_code != 404:
                self.notice = Notice("error", "Failed to delete task. Please try again.")
                return False
            self.notice = Notice("info", "Task was already deleted.")
        else:
            self.notice = Notice("success", "Task deleted successfully.")
        self.refresh()
        return True

    def columns(self) -> dict[str, list[Task]]:
        """Current page grouped by status, in board column order."""
        grouped: dict[str, list[Task]] = {status: [] for status in TASK_STATUSES}
        for task in self.tasks:
            grouped[task.status].append(task)
        return grouped
