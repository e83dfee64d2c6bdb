"""Authentication module for the calendar dashboard.

Provides Google OAuth sign-in, cookie sessions and the session gate.

## OAuth Flow

1. User clicks "Sign in with Google"
2. Redirect to Google OAuth consent screen
3. Google redirects back to /auth/callback with an authorization code
4. Exchange code for an access token
5. Create a signed session carrying the encrypted access token
6. Set cookie and redirect to the dashboard

## Scopes

- userinfo.profile and userinfo.email: To identify the user
- calendar.readonly: To list calendar events

## Security

- The access token is encrypted inside the session cookie
- Sessions use signed JWT cookies
- Signed-out sessions are rejected until they expire
"""

from calendar_dashboard.auth.dependencies import (
    get_gate_result,
    get_session_optional,
    get_session_provider,
    require_session,
)
from calendar_dashboard.auth.gate import (
    SessionGateResult,
    check_session,
    redirect_target,
)
from calendar_dashboard.auth.google import GoogleOAuth
from calendar_dashboard.auth.provider import SessionProvider
from calendar_dashboard.auth.session import (
    SessionData,
    create_session_token,
    verify_session_token,
)

__all__ = [
    "GoogleOAuth",
    "SessionProvider",
    "SessionData",
    "create_session_token",
    "verify_session_token",
    "SessionGateResult",
    "check_session",
    "redirect_target",
    "get_gate_result",
    "get_session_optional",
    "get_session_provider",
    "require_session",
]
