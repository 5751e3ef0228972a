# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: Gemini
credentials, result cache backend, name matching thresholds and logging.
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

    # === Gemini grading backend ===
    gemini_api_keys: str = ""  # comma-separated pool, rotated on quota errors
    gemini_api_key: str = ""  # single key, used when the pool is empty
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.0
    require_credentials: bool = False

    # === Result cache ===
    cache_enabled: bool = True
    cache_backend: Literal["json", "sqlite", "memory"] = "json"
    cache_root: Path = Path("~/.examgrader/cache")
    cache_max_entries: int = 0  # 0 = unbounded
    credential_state_file: Path = Path("~/.examgrader/credential_state.json")

    # === Name matching ===
    match_threshold: float = 0.5
    match_min_token_length: int = 3
    match_max_edit_distance: int = 1

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("cache_max_entries")
    @classmethod
    def validate_cache_max_entries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("cache_max_entries must be >= 0")
        return v

    @field_validator("match_threshold")
    @classmethod
    def validate_match_threshold(cls, v: float) -> float:
        if not 0.0 <= v < 1.0:
            raise ValueError("match_threshold must be in [0, 1)")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.require_credentials and not self.gemini_api_keys_list:
            errors.append(
                "REQUIRE_CREDENTIALS is set but neither GEMINI_API_KEYS "
                "nor GEMINI_API_KEY is configured"
            )

        if self.match_min_token_length < 1:
            errors.append("MATCH_MIN_TOKEN_LENGTH must be >= 1")

        if self.match_max_edit_distance < 0:
            errors.append("MATCH_MAX_EDIT_DISTANCE must be >= 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def gemini_api_keys_list(self) -> list[str]:
        """Credential pool: the comma-separated list, else the single key."""
        keys = [k.strip() for k in self.gemini_api_keys.split(",") if k.strip()]
        if not keys and self.gemini_api_key.strip():
            keys = [self.gemini_api_key.strip()]
        return keys


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-command config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
