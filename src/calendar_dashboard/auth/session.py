"""Session management using signed JWT tokens.

Sessions are stored as signed JWT tokens in HTTP-only cookies.
The tokens contain:
- Session ID (used for revocation on sign-out)
- Google account ID, email and display name
- The Google access token, Fernet-encrypted
- Session creation and expiration time

## Security

- Tokens are signed with the application secret key
- Tokens expire after a configurable period (default: 1 hour, matching the
  lifetime of a Google access token)
- Cookies are HTTP-only to prevent XSS access
- Cookies are Secure in production (HTTPS only)
- SameSite=Lax to prevent CSRF

## Token Structure

```json
{
  "sub": "google-account-id",
  "sid": "session-uuid",
  "email": "user@example.com",
  "name": "Jane Doe",
  "ptk": "gAAAAAB...",
  "iat": 1234567890,
  "exp": 1234571490,
  "type": "session"
}
```
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from cryptography.fernet import Fernet
from jose import JWTError, jwt

from calendar_dashboard.auth.encryption import decrypt_token, encrypt_token, get_fernet
from calendar_dashboard.config import Settings, get_settings

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"
TOKEN_TYPE = "session"


@dataclass
class SessionData:
    """Data stored in the session token."""

    session_id: str
    user_id: str
    email: str | None
    name: str | None
    provider_token: str
    created_at: datetime
    expires_at: datetime

    @property
    def is_expired(self) -> bool:
        """Check if the session has expired."""
        return datetime.now(timezone.utc) > self.expires_at


def create_session_token(
    user_id: str,
    provider_token: str,
    email: str | None = None,
    name: str | None = None,
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
    fernet: Fernet | None = None,
) -> str:
    """Create a signed session token for a signed-in Google account.

    Args:
        user_id: The Google account ID
        provider_token: Google access token forwarded to the Calendar API
        email: Account email, shown on the dashboard
        name: Account display name
        expires_delta: Custom expiration time (or use default from settings)
        settings: Settings to sign with (default: cached settings)
        fernet: Cipher for the provider token (default: derived from ``settings``)

    Returns:
        Signed JWT token string
    """
    settings = settings or get_settings()
    fernet = fernet or get_fernet(settings.secret_key, settings.encryption_salt)

    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.session_max_age_seconds)

    expires_at = now + expires_delta

    payload = {
        "sub": user_id,
        "sid": str(uuid.uuid4()),
        "email": email,
        "name": name,
        "ptk": encrypt_token(provider_token, fernet),
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "type": TOKEN_TYPE,
    }

    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def verify_session_token(
    token: str,
    settings: Settings | None = None,
    fernet: Fernet | None = None,
) -> SessionData | None:
    """Verify and decode a session token.

    Args:
        token: The JWT token string

    Returns:
        SessionData if valid, None if invalid or expired
    """
    settings = settings or get_settings()
    fernet = fernet or get_fernet(settings.secret_key, settings.encryption_salt)

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError as e:
        logger.debug(f"Session token verification failed: {e}")
        return None

    if payload.get("type") != TOKEN_TYPE:
        logger.debug("Invalid token type")
        return None

    try:
        session = SessionData(
            session_id=payload["sid"],
            user_id=payload["sub"],
            email=payload.get("email"),
            name=payload.get("name"),
            provider_token=decrypt_token(payload["ptk"], fernet),
            created_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, ValueError) as e:
        logger.debug(f"Invalid token payload: {e}")
        return None

    # jose checks exp, but a zero-length session can slip through within a second
    if session.is_expired:
        logger.debug("Session token expired")
        return None

    return session
