"""Error types shared by the task store, API service, and client."""

from __future__ import annotations

from typing import Any


class TaskError(Exception):
    """Base class for task domain failures."""


class TaskValidationError(TaskError, ValueError):
    """Input rejected by length/required/enum checks."""

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class TaskNotFoundError(TaskError, LookupError):
    """No task with the requested id exists in the store."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} does not exist")
        self.task_id = task_id


class TaskApiError(TaskError):
    """Single failure kind raised by the client data access layer.

    Network failures, non-2xx responses and undecodable bodies all surface as
    this error. `status_code` is None when no HTTP response was received;
    `details` carries the error body's `details` field when the server sent one.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class UnexpectedTaskError(TaskError):
    """Any store failure that is neither a validation nor a lookup error."""

    def __init__(self, action: str, cause: BaseException) -> None:
        super().__init__(f"Failed to {action}")
        self.action = action
        self.details = str(cause) or type(cause).__name__
