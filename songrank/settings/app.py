"""Application settings powered by Pydantic BaseSettings."""

import logging
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from songrank.ranker.constants import MAX_PROBE_ITERATIONS


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SONGRANK_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_logs: bool = False
    max_probe_iterations: int = Field(default=MAX_PROBE_ITERATIONS, ge=1, le=64)
    default_sort: Literal["a", "b"] = "a"

    @property
    def logging_level(self) -> int:
        """Return the stdlib logging level for ``log_level``."""
        return logging.getLevelNamesMapping()[self.log_level]


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
