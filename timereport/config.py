from __future__ import annotations

import os
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_BACKENDS = ("directory", "sqlite")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="TR_", case_sensitive=False, extra="ignore")
    """Runtime configuration for report storage and the command line."""

    app_name: str = "timereport"

    storage_backend: str = "directory"
    reports_dir: Path = Path("./data/reports")
    sqlite_path: Path = Path("./data/timereport.db")
    filename_prefix: str = "timereport - "

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @field_validator("storage_backend")
    @classmethod
    def _validate_backend(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in STORAGE_BACKENDS:
            raise ValueError(f"Unknown storage backend {value!r}, expected one of {', '.join(STORAGE_BACKENDS)}")
        return normalized

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()


settings = Settings()
