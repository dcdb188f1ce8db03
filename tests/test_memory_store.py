from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta

import pytest

from taskboard.errors import TaskNotFoundError, TaskValidationError
from taskboard.models import TaskCreate, TaskPatch
from taskboard.storage.memory import InMemoryTaskStore
from taskboard.storage.seed import load_demo_tasks
from tests.fakes import FakeClock


def _titles(store: InMemoryTaskStore, **kwargs: object) -> list[str]:
    return [task.title for task in store.list_tasks(**kwargs).tasks]  # type: ignore[arg-type]


def test_create_then_get_returns_equal_record(store: InMemoryTaskStore) -> None:
    created = store.create_task(
        {"title": "Write report", "description": "Quarterly numbers", "status": "IN_PROGRESS"}
    )
    assert store.get_task(created.id) == created
    assert created.title == "Write report"
    assert created.description == "Quarterly numbers"
    assert created.status == "IN_PROGRESS"


def test_create_sets_equal_timestamps_and_default_status(store: InMemoryTaskStore) -> None:
    created = store.create_task(TaskCreate(title="Plain"))
    assert created.created_at == created.updated_at
    assert created.status == "TO_DO"


def test_create_prepends_newest_first(store: InMemoryTaskStore) -> None:
    for title in ("first", "second", "third"):
        store.create_task({"title": title})
    assert _titles(store) == ["third", "second", "first"]


def test_unknown_id_fails_for_get_update_delete(store: InMemoryTaskStore) -> None:
    store.create_task({"title": "only"})
    with pytest.raises(TaskNotFoundError):
        store.get_task("missing")
    with pytest.raises(TaskNotFoundError):
        store.update_task("missing", {"status": "DONE"})
    with pytest.raises(TaskNotFoundError):
        store.delete_task("missing")


def test_update_status_preserves_other_fields(store: InMemoryTaskStore) -> None:
    created = store.create_task({"title": "Ship", "description": "v1"})
    updated = store.update_task(created.id, {"status": "DONE"})
    assert updated.status == "DONE"
    assert updated.title == created.title
    assert updated.description == created.description
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at
    assert store.get_task(created.id) == updated


def test_empty_update_only_refreshes_updated_at(store: InMemoryTaskStore) -> None:
    created = store.create_task({"title": "Same", "description": "stays"})
    updated = store.update_task(created.id, TaskPatch())
    assert updated.model_dump(exclude={"updated_at"}) == created.model_dump(exclude={"updated_at"})
    assert updated.updated_at > created.updated_at


def test_update_cannot_touch_store_owned_fields(store: InMemoryTaskStore) -> None:
    created = store.create_task({"title": "Keep id"})
    updated = store.update_task(
        created.id,
        {"id": "999", "createdAt": "2000-01-01T00:00:00Z", "title": "Renamed"},
    )
    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert updated.title == "Renamed"


def test_update_validates_fields_before_merge(store: InMemoryTaskStore) -> None:
    created = store.create_task({"title": "Valid"})
    with pytest.raises(TaskValidationError):
        store.update_task(created.id, {"title": ""})
    with pytest.raises(TaskValidationError):
        store.update_task(created.id, {"description": "x" * 501})
    assert store.get_task(created.id) == created


def test_update_can_clear_description(store: InMemoryTaskStore) -> None:
    created = store.create_task({"title": "Has text", "description": "remove me"})
    assert store.update_task(created.id, {"description": None}).description is None


def test_create_rejects_invalid_payloads(store: InMemoryTaskStore) -> None:
    for payload in ({"title": "   "}, {"title": "x" * 101}, {"title": "ok", "description": "d" * 501}):
        with pytest.raises(TaskValidationError):
            store.create_task(payload)
    assert store.list_tasks().pagination.total == 0


def test_status_filter_and_pagination_math(store: InMemoryTaskStore) -> None:
    statuses = ["DONE", "TO_DO", "DONE", "IN_PROGRESS", "DONE"] * 3
    for index, status in enumerate(statuses):
        store.create_task({"title": f"task {index}", "status": status})

    result = store.list_tasks(status="DONE", page=1, limit=10)
    assert all(task.status == "DONE" for task in result.tasks)
    assert result.pagination.total == 9
    assert result.pagination.total_pages == 1
    assert len(result.tasks) == 9

    everything = store.list_tasks(status="all", page=1, limit=100)
    assert everything.pagination.total == len(statuses)


def test_second_page_of_five(store: InMemoryTaskStore) -> None:
    for index in range(5):
        store.create_task({"title": f"t{index}"})
    full = store.list_tasks(page=1, limit=10).tasks

    result = store.list_tasks(page=2, limit=2)
    assert result.tasks == full[2:4]
    assert result.pagination.has_next is True
    assert result.pagination.has_prev is True
    assert result.pagination.total_pages == 3


def test_page_beyond_range_is_empty(store: InMemoryTaskStore) -> None:
    store.create_task({"title": "lonely"})
    result = store.list_tasks(page=5, limit=10)
    assert result.tasks == []
    assert result.pagination.total == 1
    assert result.pagination.has_next is False


def test_invalid_list_parameters_raise(store: InMemoryTaskStore) -> None:
    with pytest.raises(TaskValidationError):
        store.list_tasks(limit=0)
    with pytest.raises(TaskValidationError):
        store.list_tasks(page=0)
    with pytest.raises(TaskValidationError):
        store.list_tasks(status="BLOCKED")


def test_create_delete_listing_scenario(store: InMemoryTaskStore) -> None:
    task_a = store.create_task({"title": "A"})
    task_b = store.create_task({"title": "B"})
    assert task_a.created_at < task_b.created_at

    task_c = store.create_task({"title": "C"})
    assert store.list_tasks(page=1, limit=10).tasks == [task_c, task_b, task_a]

    store.delete_task(task_b.id)
    with pytest.raises(TaskNotFoundError):
        store.get_task(task_b.id)
    result = store.list_tasks()
    assert [task.title for task in result.tasks] == ["C", "A"]
    assert result.pagination.total == 2


def test_second_delete_reports_not_found(store: InMemoryTaskStore) -> None:
    created = store.create_task({"title": "gone"})
    store.delete_task(created.id)
    with pytest.raises(TaskNotFoundError):
        store.delete_task(created.id)


def test_ids_are_not_reused_after_delete(store: InMemoryTaskStore) -> None:
    first = store.create_task({"title": "1"})
    second = store.create_task({"title": "2"})
    store.delete_task(second.id)
    third = store.create_task({"title": "3"})
    assert third.id not in {first.id, second.id}
    assert store.get_task(first.id) == first


def test_updated_at_never_moves_backwards() -> None:
    clock = FakeClock(step=-timedelta(minutes=5))
    store = InMemoryTaskStore(clock=clock)
    created = store.create_task({"title": "time travel"})
    updated = store.update_task(created.id, {"status": "DONE"})
    assert updated.updated_at == created.updated_at
    assert updated.created_at <= updated.updated_at


def test_seeded_store_continues_ids_after_seed() -> None:
    seed = load_demo_tasks()
    store = InMemoryTaskStore(seed)
    assert [task.id for task in store.list_tasks().tasks] == ["1", "2", "3", "4", "5"]
    created = store.create_task({"title": "fresh"})
    assert created.id == "6"
    assert store.list_tasks().tasks[0] == created


def test_seed_with_duplicate_ids_is_rejected() -> None:
    seed = load_demo_tasks()
    with pytest.raises(ValueError, match="Duplicate seed task id"):
        InMemoryTaskStore([*seed, seed[0]])


def test_concurrent_creates_get_unique_ids() -> None:
    store = InMemoryTaskStore(clock=lambda: datetime(2024, 1, 1, tzinfo=UTC))
    with ThreadPoolExecutor(max_workers=8) as pool:
        created = list(pool.map(lambda n: store.create_task({"title": f"t{n}"}), range(64)))
    ids = [task.id for task in created]
    assert len(set(ids)) == 64
    assert store.list_tasks(limit=100).pagination.total == 64
