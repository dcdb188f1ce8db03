"""Create/edit form flows built on the data access layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from taskboard.client.board import Notice
from taskboard.client.tasks import TaskApiClient
from taskboard.errors import TaskApiError
from taskboard.models import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, Task, TaskStatus

LIST_URL = "/"


@dataclass
class TaskForm:
    title: str = ""
    description: str = ""
    status: TaskStatus = "TO_DO"

    @classmethod
    def from_task(cls, task: Task) -> TaskForm:
        return cls(title=task.title, description=task.description or "", status=task.status)

    def payload(self) -> dict[str, str]:
        # An empty description is sent as absent.
        body = {"title": self.title, "status": self.status}
        if self.description:
            body["description"] = self.description
        return body


@dataclass
class FormResult:
    task: Task | None = None
    errors: dict[str, str] = field(default_factory=dict)
    notice: Notice | None = None
    redirect_to: str | None = None

    @property
    def ok(self) -> bool:
        return self.task is not None and not self.errors


def validate_task_form(form: TaskForm) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not form.title.strip():
        errors["title"] = "Title is required"
    elif len(form.title) > TITLE_MAX_LENGTH:
        errors["title"] = f"Title must be less than {TITLE_MAX_LENGTH} characters"
    if form.description and len(form.description) > DESCRIPTION_MAX_LENGTH:
        errors["description"] = f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters"
    return errors


def load_task_for_edit(api: TaskApiClient, task_id: str) -> FormResult:
    """Fetch a task for the edit page; on failure send the user back to the list."""
    try:
        task = api.get_task(task_id)
    except TaskApiError:
        return FormResult(notice=Notice("error", "Failed to load task data"), redirect_to=LIST_URL)
    return FormResult(task=task)


def submit_task_create(api: TaskApiClient, form: TaskForm) -> FormResult:
    errors = validate_task_form(form)
    if errors:
        return FormResult(errors=errors)
    try:
        task = api.create_task(form.payload())
    except TaskApiError:
        return FormResult(notice=Notice("error", "Failed to create task. Please try again."))
    return FormResult(
        task=task,
        notice=Notice("success", "Task created successfully!"),
        redirect_to=LIST_URL,
    )


def submit_task_edit(api: TaskApiClient, task_id: str, form: TaskForm) -> FormResult:
    errors = validate_task_form(form)
    if errors:
        return FormResult(errors=errors)
    try:
        task = api.update_task(task_id, form.payload())
    except TaskApiError:
        return FormResult(notice=Notice("error", "Failed to update task. Please try again."))
    return FormResult(
        task=task,
        notice=Notice("success", "Task updated successfully!"),
        redirect_to=LIST_URL,
    )
