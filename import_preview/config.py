"""Service settings loaded from ``IMPORT_PREVIEW_*`` environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class PreviewSettings(BaseSettings):
    model_config = {
        "env_prefix": "IMPORT_PREVIEW_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    default_max_rows: int = Field(default=100, ge=1)
    max_upload_size: int = 10 * 1024 * 1024  # 10 MiB
    fetch_timeout: float = 30.0
    log_level: str = "INFO"


@lru_cache
def get_settings() -> PreviewSettings:
    return PreviewSettings()
