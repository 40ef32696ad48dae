"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Gemini API
    gemini_api_key: str | None = None  # Required by every oracle-backed endpoint
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: float = 30.0
    gemini_max_retries: int = 3

    # Oracle behaviour
    oracle_timeout_seconds: float = 45.0
    max_tool_rounds: int = 4

    # Mock incident data
    incident_seed: int = 1
    incident_count: int = 200
    incident_history_days: int = 90

    # Patrol routing
    patrol_speed_kmh: float = 20.0
    route_ordering: Literal["latitude", "nearest_neighbor"] = "latitude"
    max_oracle_hotspots: int = 7
    max_derived_hotspots: int = 5

    # Women's safety alerts
    alert_lookback_days: int = 14

    # API settings
    cors_origins: list[str] = ["*"]  # Restrict in production
    rate_limit_per_minute: int = 30

    # Environment
    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
