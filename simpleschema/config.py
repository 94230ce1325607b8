# simpleschema/config.py
"""
simpleschema configuration via Pydantic Settings.

Resolution order: explicit arguments > env vars (SIMPLESCHEMA_*) > .env file > defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SimpleSchemaConfig(BaseSettings):
    """Central configuration for simpleschema."""

    model_config = SettingsConfigDict(
        env_prefix="SIMPLESCHEMA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Descriptors ---
    # `any` already admits null; accepting `nullable` on it is a policy choice.
    allow_nullable_any: bool = False

    # --- Compiler ---
    compile_cache_size: int = Field(default=256, ge=0)

    # --- Logging ---
    log_level: str = "WARNING"

    # --- Paths ---
    home_dir: Path = Field(default_factory=lambda: Path.home() / ".simpleschema")

    @property
    def log_dir(self) -> Path:
        return self.home_dir / "logs"


@lru_cache(maxsize=1)
def get_config() -> SimpleSchemaConfig:
    """Return the global config singleton."""
    return SimpleSchemaConfig()
