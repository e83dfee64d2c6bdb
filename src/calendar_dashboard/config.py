"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
All sensitive values (secrets, OAuth credentials) should be provided via
environment variables, not config files.

## Required Environment Variables

- SECRET_KEY: Application secret for session signing and token encryption

## Optional Environment Variables

- GOOGLE_CLIENT_ID: Google OAuth client ID
- GOOGLE_CLIENT_SECRET: Google OAuth client secret
- GOOGLE_REDIRECT_URI: OAuth callback URL (default: local /auth/callback)
- DISPLAY_TIMEZONE: IANA timezone used for day boundaries (default: UTC)
- ENCRYPTION_SALT: Salt for token encryption (default: derived from SECRET_KEY)
- LOG_LEVEL: Root log level (default: INFO)
- DEBUG: Enable debug mode (default: false)

## Example .env file

```
SECRET_KEY=your-secret-key-at-least-32-characters
GOOGLE_CLIENT_ID=your-google-client-id.apps.googleusercontent.com
GOOGLE_CLIENT_SECRET=your-google-client-secret
DISPLAY_TIMEZONE=Europe/Berlin
```
"""

from __future__ import annotations

import hashlib
import secrets
from functools import lru_cache
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VERSION = "0.1.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Google Calendar Dashboard"
    app_version: str = VERSION
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Security
    secret_key: str = Field(
        ...,
        min_length=32,
        description="Secret key for signing and encryption (min 32 chars)",
    )
    encryption_salt: str = Field(
        default="",
        validate_default=True,
        description="Salt for token encryption (auto-generated if not provided)",
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Google OAuth
    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_redirect_uri: str = "http://localhost:8000/auth/callback"
    google_scopes: list[str] = Field(
        default=[
            "https://www.googleapis.com/auth/userinfo.profile",
            "https://www.googleapis.com/auth/userinfo.email",
            "https://www.googleapis.com/auth/calendar.readonly",
        ],
        description="OAuth scopes requested at sign-in",
    )

    # Google Calendar API
    calendar_api_base_url: str = "https://www.googleapis.com/calendar/v3"
    calendar_max_results: int = Field(default=250, ge=1, le=2500)
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    # Dashboard
    display_timezone: str = "UTC"

    # Session
    session_cookie_name: str = "calendar_session"
    session_max_age_seconds: int = 60 * 60  # Google access tokens live ~1h

    @field_validator("encryption_salt", mode="before")
    @classmethod
    def generate_encryption_salt(cls, v: str, info) -> str:
        """Generate encryption salt from secret_key if not provided."""
        if v:
            return v
        secret_key = info.data.get("secret_key", "")
        if secret_key:
            return hashlib.sha256(f"{secret_key}-salt".encode()).hexdigest()[:32]
        return secrets.token_hex(16)

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, v: str) -> str:
        """Reject timezone names zoneinfo cannot resolve."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def google_oauth_configured(self) -> bool:
        """Check if Google OAuth is configured."""
        return bool(self.google_client_id and self.google_client_secret)

    @property
    def tz(self) -> ZoneInfo:
        """Display timezone as a tzinfo."""
        return ZoneInfo(self.display_timezone)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
