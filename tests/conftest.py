from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from taskboard.api.main import create_app
from taskboard.client import tasks as tasks_module
from taskboard.client.tasks import TaskApiClient
from taskboard.config.settings import Settings
from taskboard.storage.memory import InMemoryTaskStore
from tests.fakes import FakeClock, route_through


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryTaskStore:
    return InMemoryTaskStore(clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_name="taskboard-test",
        storage_backend="memory",
        seed_demo_tasks=False,
        default_page_size=10,
        max_page_size=100,
    )


@pytest.fixture
def client(store: InMemoryTaskStore, settings: Settings) -> Iterator[TestClient]:
    app = create_app(storage=store, settings_override=settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def api(monkeypatch: pytest.MonkeyPatch, client: TestClient) -> TaskApiClient:
    """Typed client whose HTTP calls are served by the in-process app."""
    monkeypatch.setattr(tasks_module, "_request_json", route_through(client))
    return TaskApiClient("http://testserver", timeout_s=2.0)
