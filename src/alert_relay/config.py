"""Application configuration via pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_SETTINGS = (
    "slack_client_id",
    "slack_client_secret",
    "slack_signing_secret",
    "ticket_system_url",
    "ticket_system_api_key",
    "database_url",
    "datto_api_key",
    "port",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Slack app
    slack_client_id: str = ""
    slack_client_secret: str = ""
    slack_signing_secret: str = ""

    # Freshservice helpdesk
    ticket_system_url: str = ""
    ticket_system_api_key: str = ""
    ticket_requester_email: str = "noreply@dattobackup.com"

    # Team credential storage (memory:// or file:///path/teams.json)
    database_url: str = ""

    # Inbound Datto webhook shared secret
    datto_api_key: str = ""

    # Message layout
    alerts_channel: str = "alerts"
    bot_username: str = "dorian"
    bot_icon_emoji: str = ":panda_face:"
    alert_placement: Literal["attachment", "message"] = "attachment"
    annotation_mode: Literal["append", "replace"] = "append"

    # App
    environment: str = "development"
    log_level: str = "INFO"
    port: int | None = None

    def missing_required(self) -> list[str]:
        """Return the environment variable names of required settings left unset."""
        return [name.upper() for name in REQUIRED_SETTINGS if not getattr(self, name)]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings. Lazy initialization to avoid import-time errors."""
    return Settings()
