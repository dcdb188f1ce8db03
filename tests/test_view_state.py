from __future__ import annotations

import pytest

from taskboard.client.view_state import ViewState, parse_view_state


@pytest.mark.parametrize("query", [None, "", "?", {}, "/"])
def test_defaults_when_nothing_is_set(query: object) -> None:
    assert parse_view_state(query) == ViewState(status="all", page=1, view="list")  # type: ignore[arg-type]


def test_parses_query_string_url_and_mapping() -> None:
    expected = ViewState(status="DONE", page=3, view="grid")
    assert parse_view_state("status=DONE&page=3&view=grid") == expected
    assert parse_view_state("?status=DONE&page=3&view=grid") == expected
    assert parse_view_state("http://localhost:3000/?status=DONE&page=3&view=grid") == expected
    assert parse_view_state({"status": ["DONE"], "page": ["3"], "view": "grid"}) == expected
    assert parse_view_state({"status": "DONE", "page": 3, "view": "grid"}) == expected


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("status=BLOCKED", ViewState()),
        ("status=done", ViewState()),
        ("page=abc", ViewState()),
        ("page=0", ViewState()),
        ("page=-4", ViewState()),
        ("view=table", ViewState()),
        ("status=all&page=2", ViewState(page=2)),
    ],
)
def test_malformed_values_fall_back_to_defaults(query: str, expected: ViewState) -> None:
    assert parse_view_state(query) == expected


def test_changing_filter_resets_page() -> None:
    state = ViewState(status="TO_DO", page=4, view="grid")
    changed = state.with_status("DONE")
    assert changed == ViewState(status="DONE", page=1, view="grid")
    assert state.with_status("nonsense").status == "all"


def test_changing_page_preserves_filter() -> None:
    state = ViewState(status="IN_PROGRESS", page=1)
    assert state.with_page(3) == ViewState(status="IN_PROGRESS", page=3)
    assert state.with_page(0).page == 1


def test_view_mode_switch() -> None:
    assert ViewState().with_view("grid").view == "grid"
    assert ViewState(view="grid").with_view("cards").view == "list"


def test_to_query_omits_defaults_except_page() -> None:
    assert ViewState().to_query() == "page=1"
    assert ViewState(status="DONE", page=2, view="grid").to_query() == "status=DONE&page=2&view=grid"
    assert ViewState(status="TO_DO").to_url() == "/?status=TO_DO&page=1"


@pytest.mark.parametrize(
    "state",
    [ViewState(), ViewState(status="DONE", page=7), ViewState(status="TO_DO", view="grid")],
)
def test_query_round_trip(state: ViewState) -> None:
    assert parse_view_state(state.to_query()) == state
