"""Task store backends."""

from taskboard.storage.base import TaskStore
from taskboard.storage.factory import build_task_store
from taskboard.storage.memory import InMemoryTaskStore
from taskboard.storage.postgres import PostgresTaskStore
from taskboard.storage.remote import RemoteTaskStore

__all__ = [
    "InMemoryTaskStore",
    "PostgresTaskStore",
    "RemoteTaskStore",
    "TaskStore",
    "build_task_store",
]
