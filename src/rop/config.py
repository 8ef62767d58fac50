"""
Configuration — typed settings loaded from environment/.env.

Uses pydantic-settings so the embedding application can tune the library's
logging without code changes:

    ROP_LOG_LEVEL=DEBUG
    ROP_LOG_FORMAT=json
    ROP_EXECUTION_LOG_LEVEL=DEBUG

The combinators themselves read no configuration; only the logging setup
(``rop.logs``) and ``LoggingExecutionContext`` do.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LEVEL_NAMES = frozenset(logging.getLevelNamesMapping())


class RopSettings(BaseSettings):
    """
    Library settings.

    Load order (highest priority first):
      1. Environment variables (ROP_ prefix)
      2. .env file in the working directory
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="ROP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Minimum level rendered by structlog")
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="console for humans, json for log shippers",
    )
    execution_log_level: str = Field(
        default="INFO",
        description="Level of LoggingExecutionContext start/completion events",
    )

    @field_validator("log_level", "execution_log_level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        """Accept standard logging level names in any case."""
        normalized = value.strip().upper()
        if normalized not in _LEVEL_NAMES:
            raise ValueError(
                f"Unknown log level {value!r}, expected one of: "
                + ", ".join(sorted(_LEVEL_NAMES))
            )
        return normalized

    def execution_level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.execution_log_level]


@lru_cache(maxsize=1)
def get_settings() -> RopSettings:
    """Return the process-wide settings, loaded on first use."""
    return RopSettings()
