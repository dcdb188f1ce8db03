"""Application settings."""

from functools import lru_cache
import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[3]

StorageBackend = Literal["memory", "postgres", "remote"]


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "taskboard"
    app_env: str = "dev"
    storage_backend: StorageBackend = "memory"
    database_url: str = ""
    remote_base_url: str = ""
    remote_timeout_s: float = Field(default=10.0, ge=0.1)
    seed_demo_tasks: bool = True
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    api_base_url: str = "http://127.0.0.1:8000"
    client_timeout_s: float = Field(default=10.0, ge=0.1)
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = "info"

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        extra="ignore",
        env_file=(PROJECT_ROOT / ".env", PROJECT_ROOT / ".env.local"),
        env_file_encoding="utf-8",
    )

    def resolved_database_url(self) -> str:
        return self.database_url or os.getenv("DATABASE_URL", "")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
