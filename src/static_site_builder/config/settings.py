"""Application settings powered by Pydantic BaseSettings."""

import logging
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from static_site_builder.config.constants import (
    DEFAULT_MAX_CONCURRENCY,
    ENV_PREFIX,
    MAX_CONCURRENCY_LIMIT,
)


class BuilderSettings(BaseSettings):
    """Environment configuration (SSB_LOG_LEVEL, SSB_JSON_LOGS, ...)."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    json_logs: bool = True
    max_concurrency: Annotated[
        int, Field(ge=1, le=MAX_CONCURRENCY_LIMIT)
    ] = DEFAULT_MAX_CONCURRENCY

    @property
    def log_level_number(self) -> int:
        """Get the numeric logging level, defaulting to INFO."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


def get_settings() -> BuilderSettings:
    """Get a settings instance."""
    return BuilderSettings()
