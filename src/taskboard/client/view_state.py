"""URL-derived view state for the task list.

The current filter, page and view mode are read from query parameters so
that reloading or sharing a URL reproduces the same view. Everything here is
pure: no I/O, no framework.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Literal, get_args
from urllib import parse

from taskboard.models import ALL_STATUSES, TASK_STATUSES

ViewMode = Literal["list", "grid"]
VIEW_MODES: tuple[str, ...] = get_args(ViewMode)


@dataclass(frozen=True)
class ViewState:
    status: str = ALL_STATUSES
    page: int = 1
    view: ViewMode = "list"

    def with_status(self, status: str) -> ViewState:
        """Change the filter; always go back to the first page."""
        return replace(self, status=_coerce_status(status), page=1)

    def with_page(self, page: int) -> ViewState:
        return replace(self, page=max(1, int(page)))

    def with_view(self, view: str) -> ViewState:
        return replace(self, view=view if view in VIEW_MODES else "list")

    def to_query(self) -> str:
        params: dict[str, str] = {}
        if self.status != ALL_STATUSES:
            params["status"] = self.status
        params["page"] = str(self.page)
        if self.view != "list":
            params["view"] = self.view
        return parse.urlencode(params)

    def to_url(self, path: str = "/") -> str:
        return f"{path}?{self.to_query()}"


def parse_view_state(query: str | Mapping[str, Any] | None = None) -> ViewState:
    """Build a view state from a query string, full URL, or mapping.

    Unknown or malformed values fall back to the defaults instead of failing.
    """
    params = _flatten(query)
    return ViewState(
        status=_coerce_status(params.get("status")),
        page=_coerce_page(params.get("page")),
        view=params.get("view") if params.get("view") in VIEW_MODES else "list",  # type: ignore[arg-type]
    )


def _flatten(query: str | Mapping[str, Any] | None) -> dict[str, str]:
    if query is None:
        return {}
    if isinstance(query, str):
        raw = query.split("?", 1)[1] if "?" in query else query
        return {key: values[0] for key, values in parse.parse_qs(raw).items() if values}
    flattened: dict[str, str] = {}
    for key, value in query.items():
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            value = value[0]
        if value is not None:
            flattened[key] = str(value)
    return flattened


def _coerce_status(raw: str | None) -> str:
    if raw in TASK_STATUSES:
        return raw
    return ALL_STATUSES


def _coerce_page(raw: str | None) -> int:
    try:
        page = int(raw) if raw is not None else 1
    except ValueError:
        return 1
    return page if page >= 1 else 1
