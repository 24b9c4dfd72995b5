# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Cache ===
    cache_backend: Literal["memory", "json", "sqlite", "redis"] = "memory"
    cache_root: Path = Path("~/.menucache/cache")
    cache_redis_url: str = ""
    cache_max_entries: int = 50

    # === Remote source (PostgREST / Supabase REST) ===
    remote_url: str = ""
    remote_api_key: str = ""
    remote_table: str = "menu_items"
    remote_timeout_s: float = 10.0
    remote_cuisine_timeout_s: float = 2.0

    # === Local fallback snapshot ===
    local_snapshot_path: Path = Path("~/.menucache/menu_items_snapshot.json")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("cache_max_entries")
    @classmethod
    def validate_cache_max_entries(cls, v: int) -> int:  # noqa: N805
        if v < 1:
            raise ValueError("cache_max_entries must be >= 1")
        return v

    @field_validator("remote_url")
    @classmethod
    def strip_remote_url(cls, v: str) -> str:  # noqa: N805
        return v.strip().rstrip("/")

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.remote_timeout_s <= 0:
            errors.append("REMOTE_TIMEOUT_S must be > 0")

        if self.remote_cuisine_timeout_s <= 0:
            errors.append("REMOTE_CUISINE_TIMEOUT_S must be > 0")

        if self.remote_cuisine_timeout_s > self.remote_timeout_s:
            errors.append(
                "REMOTE_CUISINE_TIMEOUT_S must not exceed REMOTE_TIMEOUT_S"
            )

        if self.remote_url and not self.remote_url.startswith(("http://", "https://")):
            errors.append("REMOTE_URL must be an http(s) URL")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
