"""Project configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Assignment
    random_seed: int | None = None  # None: seeded from the current time
    bootstrap_seed_experiments: bool = True

    # Logging
    log_level: str = "INFO"

    # Prometheus metric names
    assignment_metric_name: str = "experiments_count"
    conversion_metric_name: str = "conversion_count"
    dropped_conversion_metric_name: str = "dropped_conversion_count"


settings = Settings()
