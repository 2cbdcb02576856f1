"""Application settings using Pydantic Settings for typed configuration.

This module centralizes all configuration and provides type-safe access to settings.
Settings are loaded from environment variables with sensible defaults.
"""

import re
from datetime import timedelta
from functools import lru_cache

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h|d|w|y)?\s*$")

_DURATION_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
    "y": timedelta(days=365.25),
}


def parse_duration(value: str | int | float | timedelta) -> timedelta:
    """Parse a duration such as "15m", "3650d", "500ms" or a number of seconds.

    Raises:
        ValueError: If the value cannot be interpreted as a duration
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int | float):
        return timedelta(seconds=value)

    match = _DURATION_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return float(amount) * _DURATION_UNITS[unit or "s"]


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    env_name: str = "development"
    app_name: str = "Telemedicine Platform"
    api_prefix: str = "/api"

    # Database
    database_url: str = "sqlite+aiosqlite:///./telemedicine.db"
    database_synchronize: bool = False

    # Admin panel
    session_secret_key: str
    admin_username: str
    admin_password: str

    # CORS
    cors_origins: str = "*"

    # Email (Resend)
    resend_api_key: str | None = None
    app_domain: str = "resend.dev"
    client_url: str = "http://localhost:3000"
    mail_default_name: str = "Telemedicine Platform"
    mail_send_attempts: int = Field(default=3, ge=1, le=10)

    # Auth tokens
    auth_jwt_secret: str
    auth_jwt_token_expires_in: timedelta = timedelta(minutes=15)
    auth_refresh_secret: str
    auth_refresh_token_expires_in: timedelta = timedelta(days=3650)
    auth_forgot_secret: str
    auth_forgot_token_expires_in: timedelta = timedelta(minutes=30)
    auth_confirm_email_secret: str
    auth_confirm_email_token_expires_in: timedelta = timedelta(days=1)
    auth_bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    @field_validator(
        "auth_jwt_token_expires_in",
        "auth_refresh_token_expires_in",
        "auth_forgot_token_expires_in",
        "auth_confirm_email_token_expires_in",
        mode="before",
    )
    @classmethod
    def _parse_expires_in(cls, value: object) -> object:
        if isinstance(value, str | int | float):
            return parse_duration(value)
        return value

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @computed_field
    @property
    def mail_from(self) -> str:
        """Sender address used for transactional email."""
        return f"{self.mail_default_name} <noreply@{self.app_domain}>"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
