"""API configuration."""

from datetime import datetime
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """API settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_title: str = "A/B Testing Service"
    api_version: str = "dev"
    api_description: str = "Assigns visitors to experiment variants and counts conversions"
    build_date: str = datetime.now().strftime("%Y-%m-%dT%H:%M:%S")

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False

    # Assignment cookies
    cookie_prefix: str = "experiment_"
    cookie_max_age_seconds: int = 600


@lru_cache
def get_api_settings() -> APISettings:
    """Get cached API settings."""
    return APISettings()
