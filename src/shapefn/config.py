"""Library settings read from the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseModel):
    """Logging settings for applications that want shapefn output.

    The library itself only emits DEBUG records through its module loggers;
    these settings decide whether and how they are shown.
    """

    model_config = ConfigDict(frozen=True)

    log_level: LogLevel = "WARNING"
    log_format: str = DEFAULT_LOG_FORMAT

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from SHAPEFN_LOG_LEVEL and SHAPEFN_LOG_FORMAT."""
        values: dict[str, str] = {}
        if level := os.getenv("SHAPEFN_LOG_LEVEL"):
            values["log_level"] = level
        if log_format := os.getenv("SHAPEFN_LOG_FORMAT"):
            values["log_format"] = log_format
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
