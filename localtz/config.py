"""Simplified configuration management."""

import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


DEFAULT_WATCHED_PATH = "/etc/localtime"
DEFAULT_POLL_INTERVAL_SECONDS = 1.0
DEFAULT_MAX_RETRY_INTERVAL_SECONDS = 8.0
DEFAULT_MAX_CONSECUTIVE_ERRORS = 3


def _env_int(name: str, fallback: int) -> int:
    try:
        return int(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


def _env_float(name: str, fallback: float) -> float:
    try:
        return float(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


class Settings(BaseModel):
    """Watcher settings with lightweight env fallbacks."""

    # Values read from the environment come in through default factories.
    model_config = ConfigDict(validate_default=True)

    # Watched link
    watched_path: str = Field(default_factory=lambda: os.getenv("LOCALTZ_PATH", DEFAULT_WATCHED_PATH))
    default_timezone: Optional[str] = Field(default_factory=lambda: os.getenv("LOCALTZ_DEFAULT") or None)

    # Cadence and failure policy
    poll_interval_seconds: float = Field(
        default_factory=lambda: _env_float("LOCALTZ_POLL_INTERVAL", DEFAULT_POLL_INTERVAL_SECONDS),
        gt=0,
        allow_inf_nan=False,
    )
    max_retry_interval_seconds: float = Field(
        default_factory=lambda: _env_float("LOCALTZ_MAX_RETRY_INTERVAL", DEFAULT_MAX_RETRY_INTERVAL_SECONDS),
        gt=0,
        allow_inf_nan=False,
    )
    max_consecutive_errors: int = Field(
        default_factory=lambda: _env_int("LOCALTZ_MAX_ERRORS", DEFAULT_MAX_CONSECUTIVE_ERRORS),
        ge=0,
    )
    use_fs_events: bool = Field(default_factory=lambda: os.getenv("LOCALTZ_FS_EVENTS", "1") != "0")

    # Diagnostics
    log_level: str = Field(default_factory=lambda: os.getenv("LOCALTZ_LOG_LEVEL", "WARNING"))

    @field_validator("default_timezone")
    @classmethod
    def _validate_default_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        candidate = value.strip()
        if not candidate:
            return None
        try:
            ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {candidate}") from exc
        return candidate


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
