"""Identity and session provider.

`SessionProvider` is the one object the rest of the application talks to for
anything involving sign-in state. It is created by the app factory, kept on
``app.state`` and handed to routes through a FastAPI dependency, so each
application instance (and each test) owns its own OAuth state map and
revocation set.

## Operations

- ``sign_in_with_oauth()``: consent URL with a one-time state token
- ``exchange_code_for_session(code, state)``: callback handling, returns the
  signed session token to put in the cookie
- ``get_session(token)``: verified session or None
- ``sign_out(token)``: invalidate locally, then revoke at Google
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone

from cryptography.fernet import Fernet
from jose import JWTError, jwt

from calendar_dashboard.auth.encryption import get_fernet
from calendar_dashboard.auth.google import GoogleOAuth
from calendar_dashboard.auth.session import (
    ALGORITHM,
    SessionData,
    create_session_token,
    verify_session_token,
)
from calendar_dashboard.config import Settings, get_settings
from calendar_dashboard.exceptions import OAuthStateError, SignOutError

logger = logging.getLogger(__name__)

# State tokens expire after 10 minutes
STATE_MAX_AGE_SECONDS = 600


class SessionProvider:
    """Google-backed session provider.

    Example:
        ```python
        provider = SessionProvider(settings)

        url = provider.sign_in_with_oauth()
        # ... user consents, Google redirects back with code and state ...
        token = await provider.exchange_code_for_session(code, state)

        session = provider.get_session(token)
        await provider.sign_out(token)
        assert provider.get_session(token) is None
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        oauth: GoogleOAuth | None = None,
        fernet: Fernet | None = None,
    ):
        self.settings = settings or get_settings()
        self.oauth = oauth or GoogleOAuth(settings=self.settings)
        self._fernet = fernet or get_fernet(
            self.settings.secret_key, self.settings.encryption_salt
        )
        self._oauth_states: dict[str, datetime] = {}
        # session id -> expiry; entries are pruned once the JWT would be dead anyway
        self._revoked: dict[str, datetime] = {}

    @property
    def is_configured(self) -> bool:
        return self.oauth.is_configured

    def _prune_states(self) -> None:
        now = datetime.now(timezone.utc)
        expired = [
            s
            for s, created in self._oauth_states.items()
            if (now - created).total_seconds() >= STATE_MAX_AGE_SECONDS
        ]
        for state in expired:
            del self._oauth_states[state]

    def _generate_state(self) -> str:
        self._prune_states()
        state = secrets.token_urlsafe(32)
        self._oauth_states[state] = datetime.now(timezone.utc)
        return state

    def _verify_state(self, state: str) -> bool:
        """Verify and consume a state token."""
        created = self._oauth_states.pop(state, None)
        if created is None:
            return False

        age = (datetime.now(timezone.utc) - created).total_seconds()
        return age < STATE_MAX_AGE_SECONDS

    def _prune_revoked(self) -> None:
        now = datetime.now(timezone.utc)
        for session_id in [s for s, exp in self._revoked.items() if exp < now]:
            del self._revoked[session_id]

    def sign_in_with_oauth(self) -> str:
        """Start a Google sign-in.

        Returns:
            Consent screen URL to redirect the browser to

        Raises:
            RuntimeError: If Google OAuth is not configured
        """
        state = self._generate_state()
        return self.oauth.get_authorization_url(state=state)

    async def exchange_code_for_session(self, code: str, state: str) -> str:
        """Complete a sign-in from the OAuth callback.

        Args:
            code: Authorization code from Google
            state: State token issued by ``sign_in_with_oauth``

        Returns:
            Signed session token

        Raises:
            OAuthStateError: If the state is unknown, reused or expired
            TokenExchangeError: If Google rejects the code
        """
        if not self._verify_state(state):
            raise OAuthStateError("Invalid or expired state token")

        access_token = await self.oauth.exchange_code(code)
        account = await self.oauth.get_account(access_token)

        logger.info(f"User {account.email or account.id} signed in")

        return create_session_token(
            user_id=account.id,
            provider_token=access_token,
            email=account.email,
            name=account.name,
            settings=self.settings,
            fernet=self._fernet,
        )

    def get_session(self, token: str | None) -> SessionData | None:
        """Look up the session behind a cookie value.

        Returns:
            SessionData, or None when absent, invalid, expired or signed out
        """
        if not token:
            return None

        session = verify_session_token(token, settings=self.settings, fernet=self._fernet)
        if session is None:
            return None

        if session.session_id in self._revoked:
            logger.debug(f"Session {session.session_id} was signed out")
            return None

        return session

    def _unverified_session_claims(self, token: str) -> tuple[str, datetime] | None:
        try:
            claims = jwt.decode(
                token,
                self.settings.secret_key,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
            return claims["sid"], datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        except (JWTError, KeyError, ValueError, TypeError):
            return None

    async def sign_out(self, token: str | None) -> None:
        """Invalidate a session.

        The session is marked revoked locally first, so it is dead for this
        application even when the call to Google fails.

        Raises:
            SignOutError: If Google refuses to revoke the provider token
        """
        if not token:
            return

        claims = self._unverified_session_claims(token)
        if claims is None:
            logger.debug("Sign-out with an unreadable session token")
            return

        session_id, expires_at = claims
        session = self.get_session(token)

        self._prune_revoked()
        self._revoked[session_id] = expires_at

        if session is None:
            return

        logger.info(f"User {session.email or session.user_id} signed out")

        if not await self.oauth.revoke_token(session.provider_token):
            raise SignOutError("Google did not revoke the access token")
