"""Typed client for the task REST API.

Every method returns decoded models or raises `TaskApiError`. Network
failures, non-2xx responses and undecodable payloads all collapse into that
one error; no request is retried.
"""

from __future__ import annotations

import http.client
import json
import logging
from collections.abc import Mapping
from typing import Any
from urllib import error, parse, request

from pydantic import ValidationError

from taskboard.config.settings import Settings, get_settings
from taskboard.errors import TaskApiError
from taskboard.models import ALL_STATUSES, Task, TaskCreate, TaskPage, TaskPatch

logger = logging.getLogger(__name__)


class TaskApiClient:
    """Backend-agnostic client for the /tasks contract."""

    def __init__(self, base_url: str, *, timeout_s: float = 10.0) -> None:
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> TaskApiClient:
        settings = settings or get_settings()
        return cls(settings.api_base_url, timeout_s=settings.client_timeout_s)

    def list_tasks(self, *, page: int = 1, status: str = ALL_STATUSES, limit: int = 10) -> TaskPage:
        params: dict[str, object] = {"page": page, "limit": limit}
        if status and status != ALL_STATUSES:
            params["status"] = status
        data = self._call("GET", "/tasks", params=params, action="fetch tasks")
        return self._decode(TaskPage, data, action="fetch tasks")

    def get_task(self, task_id: str) -> Task:
        data = self._call("GET", f"/tasks/{_quote(task_id)}", action="fetch task")
        return self._decode(Task, data, action="fetch task")

    def create_task(self, payload: TaskCreate | Mapping[str, Any]) -> Task:
        body = _body(payload, TaskCreate)
        data = self._call("POST", "/tasks", payload=body, action="create task")
        return self._decode(Task, data, action="create task")

    def update_task(self, task_id: str, patch: TaskPatch | Mapping[str, Any]) -> Task:
        body = _body(patch, TaskPatch)
        data = self._call(
            "PATCH",
            f"/tasks/{_quote(task_id)}",
            payload=body,
            action="update task",
        )
        return self._decode(Task, data, action="update task")

    def delete_task(self, task_id: str) -> bool:
        self._call("DELETE", f"/tasks/{_quote(task_id)}", action="delete task")
        return True

    def _call(
        self,
        method: str,
        path: str,
        *,
        action: str,
        params: dict[str, object] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        url = _url_for(self.base_url, path, params)
        status_code, data = _request_json(
            method=method,
            url=url,
            payload=payload,
            timeout_s=self.timeout_s,
        )
        if not 200 <= status_code < 300:
            logger.warning(
                "task_client event=request_failed method=%s url=%s status=%s",
                method,
                url,
                status_code,
            )
            details = data.get("details") if isinstance(data, dict) else None
            raise TaskApiError(
                f"Failed to {action}",
                status_code=status_code,
                details=details,
            )
        return data

    @staticmethod
    def _decode(model: type[Any], data: Any, *, action: str) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise TaskApiError(f"Failed to {action}: unexpected response shape") from exc


def _body(
    payload: TaskCreate | TaskPatch | Mapping[str, Any],
    model: type[TaskCreate] | type[TaskPatch],
) -> dict[str, Any]:
    if isinstance(payload, Mapping):
        return dict(payload)
    if isinstance(payload, model):
        return payload.model_dump(exclude_unset=True)
    raise TypeError(f"Unsupported payload type: {type(payload)!r}")


def _quote(task_id: str) -> str:
    return parse.quote(str(task_id), safe="")


def _url_for(base_url: str, path: str, params: dict[str, object] | None = None) -> str:
    url = f"{base_url}{path}"
    if params:
        encoded = parse.urlencode(
            {key: value for key, value in params.items() if value is not None},
            doseq=True,
        )
        if encoded:
            return f"{url}?{encoded}"
    return url


def _request_json(
    *,
    method: str,
    url: str,
    payload: dict[str, Any] | None = None,
    timeout_s: float = 10.0,
) -> tuple[int, Any]:
    raw_payload: bytes | None = None
    headers = {"Accept": "application/json"}
    if payload is not None:
        raw_payload = json.dumps(payload).encode("utf-8")
        headers["Content-Type"] = "application/json"

    req = request.Request(url=url, method=method, data=raw_payload, headers=headers)
    try:
        with request.urlopen(req, timeout=timeout_s) as response:
            raw_body = response.read()
            status_code = response.status
    except error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace")
        return exc.code, _decode_body(body)
    # URLError and TimeoutError are OSErrors; a dropped connection surfaces
    # as http.client.HTTPException (RemoteDisconnected, IncompleteRead).
    except (OSError, http.client.HTTPException) as exc:
        reason = getattr(exc, "reason", None) or exc
        logger.warning(
            "task_client event=unreachable method=%s url=%s reason=%s",
            method,
            url,
            reason,
        )
        raise TaskApiError(f"Request failed: {reason}") from exc

    try:
        body = raw_body.decode("utf-8")
    except UnicodeDecodeError as exc:
        logger.warning(
            "task_client event=undecodable_body method=%s url=%s status=%s",
            method,
            url,
            status_code,
        )
        raise TaskApiError("Response body is not valid UTF-8", status_code=status_code) from exc
    return status_code, _decode_body(body)


def _decode_body(body: str) -> Any:
    if not body:
        return {}
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        return {"raw": body}
