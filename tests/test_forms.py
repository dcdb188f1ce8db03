from __future__ import annotations

from taskboard.client.forms import (
    TaskForm,
    load_task_for_edit,
    submit_task_create,
    submit_task_edit,
    validate_task_form,
)
from taskboard.errors import TaskApiError
from tests.fakes import FakeTaskApi, make_task


def test_validate_task_form_messages() -> None:
    assert validate_task_form(TaskForm(title="ok")) == {}
    assert validate_task_form(TaskForm(title="  ")) == {"title": "Title is required"}
    assert validate_task_form(TaskForm(title="x" * 101)) == {
        "title": "Title must be less than 100 characters"
    }
    assert validate_task_form(TaskForm(title="ok", description="d" * 501)) == {
        "description": "Description must be less than 500 characters"
    }


def test_invalid_form_is_not_submitted() -> None:
    api = FakeTaskApi()
    result = submit_task_create(api, TaskForm(title=""))  # type: ignore[arg-type]
    assert result.ok is False
    assert result.errors == {"title": "Title is required"}
    assert api.sent == []


def test_create_sends_payload_and_redirects() -> None:
    api = FakeTaskApi()
    result = submit_task_create(api, TaskForm(title="New", status="IN_PROGRESS"))  # type: ignore[arg-type]
    assert result.ok is True
    assert result.redirect_to == "/"
    assert api.sent == [("create", None, {"title": "New", "status": "IN_PROGRESS"})]


def test_load_for_edit_redirects_to_list_on_failure() -> None:
    api = FakeTaskApi()
    api.get_error = TaskApiError("Failed to fetch task", status_code=500)
    result = load_task_for_edit(api, "1")  # type: ignore[arg-type]
    assert result.task is None
    assert result.redirect_to == "/"
    assert result.notice is not None and result.notice.message == "Failed to load task data"


def test_edit_round_trip_through_form() -> None:
    api = FakeTaskApi([make_task("1", "TO_DO", "Draft")])
    loaded = load_task_for_edit(api, "1")  # type: ignore[arg-type]
    assert loaded.task is not None

    form = TaskForm.from_task(loaded.task)
    form.status = "DONE"
    result = submit_task_edit(api, "1", form)  # type: ignore[arg-type]

    assert result.ok is True
    assert result.task is not None and result.task.status == "DONE"
    assert api.sent == [("update", "1", {"title": "Draft", "status": "DONE"})]


def test_edit_failure_reports_without_redirect() -> None:
    api = FakeTaskApi()
    result = submit_task_edit(api, "missing", TaskForm(title="x"))  # type: ignore[arg-type]
    assert result.ok is False
    assert result.redirect_to is None
    assert result.notice is not None and result.notice.level == "error"
