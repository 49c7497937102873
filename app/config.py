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
        default="sqlite:///./congregation_portal.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me",
        description="Secret key used to verify bearer tokens",
        min_length=1,
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="Asia/Bangkok",
        description="IANA timezone used when presenting timestamps",
    )
    log_level: str = Field(default="INFO", description="Level applied to the app loggers")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending notification emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of notification messages",
        min_length=3,
    )
    sendgrid_sender_name: str = Field(
        default="Congregation Portal",
        description="Display name attached to the sender address",
    )
    notification_batch_size: int = Field(
        default=10,
        description="Number of urgent announcement emails sent concurrently per batch",
        gt=0,
    )
    notification_batch_delay_ms: int = Field(
        default=100,
        description="Pause between two consecutive batches, in milliseconds",
        ge=0,
    )
    notification_send_timeout_seconds: float = Field(
        default=30.0,
        description="Upper bound for a single email send before it counts as failed",
        gt=0,
    )
    notification_drain_timeout_seconds: float = Field(
        default=10.0,
        description="Time allowed at shutdown for in-flight notification runs",
        ge=0,
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @property
    def email_enabled(self) -> bool:
        return bool(self.sendgrid_api_key and self.sendgrid_sender)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
