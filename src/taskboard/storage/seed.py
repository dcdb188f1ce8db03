"""Demo records loaded into the in-memory store on startup."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from taskboard.models import Task

DATA_DIR = Path(__file__).resolve().parent / "data"


def load_seed_json(filename: str) -> dict[str, Any]:
    path = DATA_DIR / filename
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_demo_tasks() -> list[Task]:
    """Return the demo tasks in listing order (newest first)."""
    data = load_seed_json("demo_tasks.json")
    return [Task.model_validate(item) for item in data["tasks"]]
