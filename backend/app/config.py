"""Application configuration using Pydantic Settings.

All settings are loaded from environment variables or .env file.
The optional GitHub token is held in a SecretStr to prevent accidental logging.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="GHH_",
    )

    # Application
    app_name: str = "GitHub Hunter"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://127.0.0.1:3000"])

    # Redis (search history, preferences, battle rosters)
    redis_url: str = "redis://localhost:6379/0"
    redis_session_ttl: int = 604800  # 7 days

    # GitHub API
    github_api_base: str = "https://api.github.com"
    github_token: SecretStr | None = None
    github_timeout: float = 30.0
    github_per_page: int = Field(default=100, ge=1, le=100)

    # Response cache
    cache_ttl_seconds: int = 300  # 5 minutes
    cache_max_entries: int = Field(default=256, ge=1)

    # Dashboard behaviour
    history_max_entries: int = 8
    battle_max_participants: int = 3
    activity_window_months: int = 6
    public_base_url: str = "http://localhost:3000"

    # Prometheus
    metrics_enabled: bool = True

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        return v.lower()

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
