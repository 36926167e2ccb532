"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./cofound.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="IANA timezone name used for stored timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to open HTTP and websocket connections",
    )

    celery_broker_url: str = Field(
        default="redis://localhost:6379/1",
        description="Broker backing the durable message delivery queue",
    )
    celery_result_backend: str = Field(
        default="redis://localhost:6379/1",
        description="Result backend for the Celery application",
    )
    delivery_queue_name: str = Field(
        default="message-delivery",
        description="Name of the durable queue that holds delivery jobs",
        min_length=1,
    )
    delivery_max_attempts: int = Field(
        default=3,
        description="Number of failed attempts after which a message is marked failed",
    )
    delivery_backoff_seconds: float = Field(
        default=2.0,
        description="Base delay of the exponential retry backoff",
        gt=0,
    )

    push_api_url: str | None = Field(
        default=None,
        description="FCM-compatible HTTP endpoint used to send push notifications",
    )
    push_server_key: str | None = Field(
        default=None,
        description="Server key sent in the Authorization header of push requests",
    )
    push_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to push notification requests",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_delivery_settings(self) -> "Settings":
        if self.delivery_max_attempts < 1:
            raise ValueError("DELIVERY_MAX_ATTEMPTS must be at least 1")
        if bool(self.push_api_url) ^ bool(self.push_server_key):
            raise ValueError(
                "PUSH_API_URL and PUSH_SERVER_KEY must both be provided to enable push notifications"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
