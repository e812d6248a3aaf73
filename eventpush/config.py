"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    store_backend: Literal["sql", "firestore"] = Field(
        default="sql",
        description="Document store implementation used by the service",
    )
    database_url: str = Field(
        default="sqlite:///./eventpush.db",
        description="SQLAlchemy URL used when STORE_BACKEND is 'sql'",
        min_length=1,
    )
    firebase_credentials_path: str | None = Field(
        default=None,
        description="Path to a service account JSON file; default credentials are used when unset",
    )
    firebase_project_id: str | None = Field(
        default=None,
        description="Firebase project identifier override",
    )
    push_enabled: bool = Field(
        default=True,
        description="Deliver pushes through Firebase Cloud Messaging; when false pushes are dropped",
    )

    user_notifications_collection: str = Field(default="user_notifications", min_length=1)
    creator_notifications_collection: str = Field(
        default="creator_notifications", min_length=1
    )
    device_tokens_collection: str = Field(default="user_tokens", min_length=1)
    events_collection: str = Field(default="events", min_length=1)

    android_channel_id: str = Field(
        default="high_importance_channel",
        description="Android notification channel used for display pushes",
    )
    click_action: str = Field(
        default="FLUTTER_NOTIFICATION_CLICK",
        description="Routing marker the mobile client uses to open notifications",
    )

    reminder_interval_minutes: int = Field(
        default=60,
        description="Minutes between two event reminder runs",
        gt=0,
    )
    reminder_window_start_minutes: int = Field(
        default=60,
        description="Lower bound, relative to now, of the reminder window",
        ge=0,
    )
    reminder_window_end_minutes: int = Field(
        default=120,
        description="Upper bound, relative to now, of the reminder window",
        ge=0,
    )
    scheduler_enabled: bool = Field(
        default=True,
        description="Start the reminder job together with the HTTP application",
    )

    app_timezone: str = Field(default="UTC")
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def _validate_reminder_window(self) -> "Settings":
        if self.reminder_window_end_minutes < self.reminder_window_start_minutes:
            raise ValueError(
                "REMINDER_WINDOW_END_MINUTES must be greater than or equal to "
                "REMINDER_WINDOW_START_MINUTES"
            )
        return self

    @property
    def notification_collections(self) -> frozenset[str]:
        """Return the collections that hold notification records."""

        return frozenset(
            {self.user_notifications_collection, self.creator_notifications_collection}
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
