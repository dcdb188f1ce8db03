"""Client data access layer and view-state logic."""

from taskboard.client.board import Notice, TaskBoard
from taskboard.client.tasks import TaskApiClient
from taskboard.client.view_state import ViewState, parse_view_state

__all__ = [
    "Notice",
    "TaskApiClient",
    "TaskBoard",
    "ViewState",
    "parse_view_state",
]
