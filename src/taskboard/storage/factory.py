"""Build the configured task store backend."""

from __future__ import annotations

import logging

from taskboard.client.tasks import TaskApiClient
from taskboard.config.settings import Settings
from taskboard.storage.base import TaskStore
from taskboard.storage.memory import InMemoryTaskStore
from taskboard.storage.postgres import PostgresTaskStore
from taskboard.storage.remote import RemoteTaskStore
from taskboard.storage.seed import load_demo_tasks

logger = logging.getLogger(__name__)


def build_task_store(settings: Settings) -> TaskStore:
    backend = settings.storage_backend
    if backend == "postgres":
        database_url = settings.resolved_database_url()
        if not database_url:
            raise RuntimeError(
                "Missing database URL. Set TASKBOARD_DATABASE_URL "
                "or DATABASE_URL before starting the app."
            )
        store: TaskStore = PostgresTaskStore(database_url)
    elif backend == "remote":
        if not settings.remote_base_url:
            raise RuntimeError("TASKBOARD_REMOTE_BASE_URL is required for remote storage.")
        store = RemoteTaskStore(
            TaskApiClient(settings.remote_base_url, timeout_s=settings.remote_timeout_s)
        )
    else:
        store = InMemoryTaskStore(load_demo_tasks() if settings.seed_demo_tasks else ())
    logger.info("task_store event=configured backend=%s", backend)
    return store
