"""Application settings powered by Pydantic BaseSettings."""

import logging
from pathlib import Path
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.prioritizer.constants import DEFAULT_KITCHEN_LOAD, DEFAULT_LATE_THRESHOLD_MINUTES


class AppSettings(BaseSettings):
    """Centralized environment configuration (``KDS_`` prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="KDS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    kitchen_load: Annotated[int, Field(ge=0, le=100)] = DEFAULT_KITCHEN_LOAD
    late_threshold_minutes: Annotated[int, Field(ge=0)] = DEFAULT_LATE_THRESHOLD_MINUTES
    menu_catalog_path: Path | None = None
    log_level: str = "INFO"
    log_json: bool = True

    def logging_level(self) -> int:
        """Return the numeric logging level for ``log_level``."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
