"""Pydantic models shared by the task store, API service, and client.

Beginner terms used in this file:
- Literal: restricts a field to a fixed set of allowed string values.
- Alias: the camelCase JSON name of a snake_case Python field (createdAt).
- Frozen model: instances cannot be mutated; changes produce a new copy.
- Patch: a partial update where only the fields actually sent are applied.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Annotated, Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import TaskValidationError

# Task lifecycle states; no other value is representable.
TaskStatus = Literal["TO_DO", "IN_PROGRESS", "DONE"]
TASK_STATUSES: tuple[str, ...] = get_args(TaskStatus)

# Sentinel meaning "no status filter" in list queries and URLs.
ALL_STATUSES = "all"

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

TaskTitle = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH),
]
TaskDescription = Annotated[str, StringConstraints(max_length=DESCRIPTION_MAX_LENGTH)]


class CamelModel(BaseModel):
    """Base for wire models whose JSON keys are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Task(CamelModel):
    """Canonical task record returned by stores and the API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: TaskTitle
    description: TaskDescription | None = None
    status: TaskStatus = "TO_DO"
    created_at: datetime
    updated_at: datetime


class TaskCreate(BaseModel):
    """Request body for POST /tasks."""

    # Unknown keys such as `id` or `createdAt` are dropped, never stored.
    model_config = ConfigDict(extra="ignore")

    title: TaskTitle
    description: TaskDescription | None = None
    status: TaskStatus = "TO_DO"

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return "TO_DO" if value is None else value


class TaskPatch(BaseModel):
    """Request body for PUT/PATCH /tasks/{id}; every field is optional."""

    model_config = ConfigDict(extra="ignore")

    title: TaskTitle | None = None
    description: TaskDescription | None = None
    status: TaskStatus | None = None

    @field_validator("title", "status")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        # Only runs for values the caller actually sent.
        if value is None:
            raise ValueError("field cannot be null")
        return value

    def changes(self) -> dict[str, Any]:
        """Fields explicitly supplied by the caller, ready to merge."""
        return self.model_dump(exclude_unset=True)


class Pagination(CamelModel):
    """Metadata describing one window over a filtered collection."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class TaskPage(CamelModel):
    """Response body for GET /tasks."""

    tasks: list[Task] = Field(default_factory=list)
    pagination: Pagination


def build_pagination(*, page: int, limit: int, total: int) -> Pagination:
    total_pages = math.ceil(total / limit)
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def check_page_window(page: int, limit: int) -> None:
    """Reject 1-based page numbers below 1 and non-positive page sizes."""
    details: list[dict[str, Any]] = []
    if page < 1:
        details.append({"loc": ["page"], "msg": "page must be >= 1", "type": "greater_than_equal"})
    if limit < 1:
        details.append({"loc": ["limit"], "msg": "limit must be >= 1", "type": "greater_than_equal"})
    if details:
        raise TaskValidationError("Invalid pagination parameters", details)


def parse_status_filter(raw: str | None) -> str | None:
    """Map a query value to a status, or None for "no filtering"."""
    if raw is None:
        return None
    value = raw.strip()
    if not value or value == ALL_STATUSES:
        return None
    if value not in TASK_STATUSES:
        raise TaskValidationError(
            "Invalid status filter",
            [
                {
                    "loc": ["status"],
                    "msg": f"status must be one of {', '.join((ALL_STATUSES, *TASK_STATUSES))}",
                    "type": "literal_error",
                }
            ],
        )
    return value


def parse_create(data: TaskCreate | Mapping[str, Any]) -> TaskCreate:
    if isinstance(data, TaskCreate):
        return data
    try:
        return TaskCreate.model_validate(data)
    except ValidationError as exc:
        raise TaskValidationError("Invalid task payload", describe_errors(exc.errors())) from exc


def parse_patch(data: TaskPatch | Mapping[str, Any]) -> TaskPatch:
    if isinstance(data, TaskPatch):
        return data
    try:
        return TaskPatch.model_validate(data)
    except ValidationError as exc:
        raise TaskValidationError("Invalid task update", describe_errors(exc.errors())) from exc


def describe_errors(errors: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Reduce pydantic error dicts to JSON-safe loc/msg/type entries."""
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": str(error.get("msg", "")),
            "type": str(error.get("type", "")),
        }
        for error in errors
    ]
