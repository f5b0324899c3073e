"""
Application settings.

Values come from environment variables (prefixed with CHESS_) and are validated by a pydantic model,
so a typo in e.g. the log level fails loudly at start-up instead of somewhere down the line.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ValidationError, field_validator

ENV_PREFIX = "CHESS_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    # None: keep matches in memory (nothing survives a restart)
    database_url: Optional[str] = None
    admin: Optional[str] = None
    log_level: str = "INFO"
    sql_echo: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}. Pick one from {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("database_url", "admin")
    @classmethod
    def empty_means_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Collect CHESS_* variables from the environment (or the given mapping) and validate them."""
    environ = os.environ if environ is None else environ
    raw = {
        name.lower(): environ[f"{ENV_PREFIX}{name.upper()}"]
        for name in Settings.model_fields
        if f"{ENV_PREFIX}{name.upper()}" in environ
    }
    try:
        return Settings(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
