"""Centralised, env-driven configuration using pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """All tunables are loaded from environment variables (or .env file)."""

    # ── Open Food Facts lookup ──────────────────────────────────────────────
    off_base_url: str = Field(
        default="https://world.openfoodfacts.org/api/v0/product",
        alias="OFF_BASE_URL",
    )
    off_timeout_seconds: float = Field(default=10.0, alias="OFF_TIMEOUT_SECONDS")
    off_user_agent: str = Field(
        default="IsItSafe/1.0 (ingredient blacklist checker)",
        alias="OFF_USER_AGENT",
    )

    # ── Blacklist storage ───────────────────────────────────────────────────
    blacklist_path: str = Field(default="./data/blacklist.json", alias="BLACKLIST_PATH")
    blacklist_storage_key: str = Field(
        default="@is_it_safe_blacklist", alias="BLACKLIST_STORAGE_KEY"
    )

    # ── Logging ─────────────────────────────────────────────────────────────
    log_path: str = Field(default="./logs/analysis.log", alias="LOG_PATH")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "populate_by_name": True,
        "extra": "ignore",
    }


# Module-level singleton – import this everywhere
settings = Settings()
