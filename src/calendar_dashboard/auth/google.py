"""Google sign-in over OAuth 2.0 (authorization code flow).

Only what the dashboard needs: the consent URL, the code exchange, the
account profile and token revocation on sign-out. The access token lives as
long as the session; no refresh token is requested.

## Setup

Create a "Web application" OAuth client in Google Cloud Console with the
Calendar API enabled, register ``<origin>/auth/callback`` as a redirect URI
and export GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET.

## Scopes

- userinfo.profile, userinfo.email: name and address shown on the dashboard
- calendar.readonly: the events listing
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from calendar_dashboard.config import Settings, get_settings
from calendar_dashboard.exceptions import TokenExchangeError

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
REVOKE_URL = "https://oauth2.googleapis.com/revoke"


@dataclass
class GoogleAccount:
    """Signed-in Google account."""

    id: str
    email: str | None
    name: str | None


class GoogleOAuth:
    """OAuth client for Google sign-in.

    Example:
        ```python
        oauth = GoogleOAuth(settings=settings)
        url = oauth.get_authorization_url(state)
        access_token = await oauth.exchange_code(code)
        account = await oauth.get_account(access_token)
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            settings: Client credentials, redirect URI, scopes and timeout
            transport: httpx transport override (tests use httpx.MockTransport)
        """
        settings = settings or get_settings()

        self.client_id = settings.google_client_id
        self.client_secret = settings.google_client_secret
        self.redirect_uri = settings.google_redirect_uri
        self.scopes = list(settings.google_scopes)
        self.timeout = settings.http_timeout_seconds
        self._transport = transport

        if not self.is_configured:
            logger.warning(
                "Google sign-in disabled: GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET are not set"
            )

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def _require_configured(self) -> None:
        if not self.is_configured:
            raise RuntimeError("Google OAuth not configured")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.timeout)

    def get_authorization_url(self, state: str) -> str:
        """Consent screen URL carrying ``state`` for CSRF protection.

        Raises:
            RuntimeError: If the client credentials are missing
        """
        self._require_configured()

        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": " ".join(self.scopes),
                "state": state,
            }
        )
        return f"{AUTHORIZE_URL}?{query}"

    async def exchange_code(self, code: str) -> str:
        """Trade the callback's authorization code for an access token.

        Raises:
            TokenExchangeError: If Google is unreachable or rejects the code
        """
        self._require_configured()

        form = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.redirect_uri,
        }
        try:
            async with self._client() as client:
                response = await client.post(TOKEN_URL, data=form)
        except httpx.HTTPError as e:
            logger.error(f"Token endpoint unreachable: {e}")
            raise TokenExchangeError("Token exchange request failed") from e

        if response.status_code != 200:
            logger.error(f"Token endpoint returned {response.status_code}: {response.text}")
            raise TokenExchangeError(f"Token exchange failed: {response.status_code}")

        try:
            return response.json()["access_token"]
        except (ValueError, KeyError) as e:
            raise TokenExchangeError("Token response has no access token") from e

    async def get_account(self, access_token: str) -> GoogleAccount:
        """Profile of the account that owns ``access_token``.

        Raises:
            TokenExchangeError: If the profile cannot be read
        """
        try:
            async with self._client() as client:
                response = await client.get(
                    USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Userinfo endpoint unreachable: {e}")
            raise TokenExchangeError("User info request failed") from e

        if response.status_code != 200:
            logger.error(f"Userinfo endpoint returned {response.status_code}: {response.text}")
            raise TokenExchangeError(f"User info request failed: {response.status_code}")

        data = response.json()
        return GoogleAccount(id=data["id"], email=data.get("email"), name=data.get("name"))

    async def revoke_token(self, token: str) -> bool:
        """Ask Google to revoke ``token``. False if it refused or was unreachable."""
        try:
            async with self._client() as client:
                response = await client.post(REVOKE_URL, params={"token": token})
        except httpx.HTTPError as e:
            logger.warning(f"Revocation request failed: {e}")
            return False

        return response.status_code == 200
