"""PostgreSQL-backed task store with automatic table migration.

Beginner terms:
- Migration: creating tables/indexes before normal reads/writes.
- BIGSERIAL: auto-incrementing id column; values are never reused.
- RETURNING: lets INSERT/UPDATE/DELETE hand back the affected row.
- Row factory: returns query rows as dict-like objects instead of tuples.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from taskboard.errors import TaskNotFoundError
from taskboard.models import (
    Task,
    TaskCreate,
    TaskPage,
    TaskPatch,
    build_pagination,
    check_page_window,
    parse_create,
    parse_patch,
    parse_status_filter,
)

logger = logging.getLogger(__name__)

# Newest first; the id breaks ties between rows created in the same instant.
_ORDER_BY = "ORDER BY created_at DESC, id DESC"


class PostgresTaskStore:
    """Thread-safe PostgreSQL-backed store for Task records."""

    def __init__(self, database_url: str) -> None:
        if not database_url:
            raise ValueError("database_url is required")
        self.database_url = database_url
        # Lock serializes operations issued through this store instance.
        self._lock = threading.Lock()
        self._psycopg, self._dict_row = self._load_psycopg()

    def migrate(self) -> None:
        """Create the tasks table and indexes if they do not already exist."""
        with self._lock, self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS board_tasks (
                    id BIGSERIAL PRIMARY KEY,
                    title TEXT NOT NULL CHECK (length(btrim(title)) BETWEEN 1 AND 100),
                    description TEXT CHECK (description IS NULL OR length(description) <= 500),
                    status TEXT NOT NULL DEFAULT 'TO_DO'
                        CHECK (status IN ('TO_DO', 'IN_PROGRESS', 'DONE')),
                    created_at TIMESTAMPTZ NOT NULL,
                    updated_at TIMESTAMPTZ NOT NULL,
                    CHECK (created_at <= updated_at)
                )
                """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_board_tasks_status
                ON board_tasks(status)
                """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_board_tasks_created_at
                ON board_tasks(created_at DESC, id DESC)
                """)
            conn.commit()
        logger.info("task_store event=migrated backend=postgres")

    def list_tasks(
        self,
        *,
        status: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> TaskPage:
        check_page_window(page, limit)
        wanted = parse_status_filter(status)
        where = "WHERE status = %s" if wanted is not None else ""
        params: tuple[Any, ...] = (wanted,) if wanted is not None else ()
        with self._lock, self._connect() as conn:
            count_row = conn.execute(
                f"SELECT COUNT(*) AS total FROM board_tasks {where}",
                params,
            ).fetchone()
            rows = conn.execute(
                f"SELECT * FROM board_tasks {where} {_ORDER_BY} LIMIT %s OFFSET %s",
                (*params, limit, (page - 1) * limit),
            ).fetchall()
        total = int(count_row["total"]) if count_row else 0
        return TaskPage(
            tasks=[self._row_to_task(row) for row in rows],
            pagination=build_pagination(page=page, limit=limit, total=total),
        )

    def get_task(self, task_id: str) -> Task:
        with self._lock, self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM board_tasks WHERE id::text = %s",
                (task_id,),
            ).fetchone()
        if row is None:
            raise TaskNotFoundError(task_id)
        return self._row_to_task(row)

    def create_task(self, payload: TaskCreate | Mapping[str, Any]) -> Task:
        data = parse_create(payload)
        now = datetime.now(tz=UTC)
        with self._lock, self._connect() as conn:
            row = conn.execute(
                """
                INSERT INTO board_tasks (title, description, status, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING *
                """,
                (data.title, data.description, data.status, now, now),
            ).fetchone()
            conn.commit()
        if row is None:
            raise RuntimeError("Failed to persist task")
        task = self._row_to_task(row)
        logger.info("task_store event=created task_id=%s status=%s", task.id, task.status)
        return task

    def update_task(self, task_id: str, patch: TaskPatch | Mapping[str, Any]) -> Task:
        changes = parse_patch(patch).changes()
        with self._lock, self._connect() as conn:
            current = conn.execute(
                "SELECT * FROM board_tasks WHERE id::text = %s FOR UPDATE",
                (task_id,),
            ).fetchone()
            if current is None:
                raise TaskNotFoundError(task_id)

            # Merge partial updates with current values.
            next_title = changes.get("title", current["title"])
            next_description = changes.get("description", current["description"])
            next_status = changes.get("status", current["status"])
            updated_at = max(datetime.now(tz=UTC), self._parse_datetime(current["updated_at"]))

            row = conn.execute(
                """
                UPDATE board_tasks
                SET title = %s,
                    description = %s,
                    status = %s,
                    updated_at = %s
                WHERE id = %s
                RETURNING *
                """,
                (next_title, next_description, next_status, updated_at, current["id"]),
            ).fetchone()
            conn.commit()
        if row is None:
            raise TaskNotFoundError(task_id)
        logger.info(
            "task_store event=updated task_id=%s fields=%s",
            task_id,
            ",".join(sorted(changes)) or "-",
        )
        return self._row_to_task(row)

    def delete_task(self, task_id: str) -> None:
        with self._lock, self._connect() as conn:
            row = conn.execute(
                "DELETE FROM board_tasks WHERE id::text = %s RETURNING id",
                (task_id,),
            ).fetchone()
            conn.commit()
        if row is None:
            raise TaskNotFoundError(task_id)
        logger.info("task_store event=deleted task_id=%s", task_id)

    def _connect(self) -> Any:
        """Open a psycopg connection that yields dict-like rows."""
        return self._psycopg.connect(self.database_url, row_factory=self._dict_row)

    @staticmethod
    def _load_psycopg() -> tuple[Any, Any]:
        """Import psycopg with a friendly install hint on failure."""
        try:
            import psycopg
            from psycopg.rows import dict_row
        except ImportError as exc:  # pragma: no cover - exercised only without dependency
            raise RuntimeError(
                "PostgreSQL storage requires psycopg. Install with: "
                'python -m pip install "psycopg[binary]>=3.2,<4.0"'
            ) from exc
        return psycopg, dict_row

    @staticmethod
    def _parse_datetime(raw: Any) -> datetime:
        """Parse datetime value from database driver output."""
        if isinstance(raw, datetime):
            return raw
        if isinstance(raw, str):
            return datetime.fromisoformat(raw)
        raise TypeError(f"Unsupported datetime value: {type(raw)!r}")

    @classmethod
    def _row_to_task(cls, row: Any) -> Task:
        """Map one DB row to the canonical Task model."""
        return Task(
            id=str(row["id"]),
            title=row["title"],
            description=row["description"],
            status=row["status"],
            created_at=cls._parse_datetime(row["created_at"]),
            updated_at=cls._parse_datetime(row["updated_at"]),
        )
