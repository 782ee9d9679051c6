"""Environment-based configuration using pydantic-settings.

Example:
    >>> from errstack.settings import get_settings
    >>> settings = get_settings()
    >>> settings.stack_depth
    32
    >>> settings.logging.level
    'WARNING'

    # Or with environment variables:
    # ERRSTACK_STACK_DEPTH=64
    # ERRSTACK_TRIM_PATHS=false
    # ERRSTACK_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Diagnostics logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ERRSTACK_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ErrstackSettings(BaseSettings):
    """Root settings for errstack.

    Example environment variables:
        ERRSTACK_STACK_DEPTH=64
        ERRSTACK_TRIM_PATHS=false
        ERRSTACK_LOG_LEVEL=DEBUG
        ERRSTACK_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="ERRSTACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    stack_depth: int = Field(
        default=32, ge=1, le=512, description="Maximum frames recorded per captured stack",
    )
    trim_paths: bool = Field(
        default=True, description="Render module-relative source paths in verbose traces",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)


_invalid_reported = False


@lru_cache(maxsize=1)
def _load() -> tuple[ErrstackSettings, list[str]]:
    try:
        return ErrstackSettings(), []
    except ValidationError as e:
        fields = [".".join(map(str, err["loc"])) or err["type"] for err in e.errors()]
        return ErrstackSettings.model_construct(logging=LoggingSettings.model_construct()), fields


def get_settings() -> ErrstackSettings:
    """Get the global settings instance (cached).

    Invalid ERRSTACK_* values (environment or .env) fall back to the defaults;
    the offending fields are reported once as a warning.
    """
    global _invalid_reported
    settings, invalid = _load()
    if invalid and not _invalid_reported:
        _invalid_reported = True
        from .logging import get_logger

        get_logger("errstack.settings").warning("invalid settings, using defaults", fields=invalid)
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    global _invalid_reported
    _load.cache_clear()
    _invalid_reported = False
