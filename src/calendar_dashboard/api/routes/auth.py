"""Authentication routes.

Handles the Google OAuth sign-in flow and sign-out.

## OAuth Flow

1. GET /auth/login - Redirect to Google consent screen
2. GET /auth/callback - Handle OAuth callback, set session cookie
3. POST /auth/logout - Invalidate session and return to the entry view
4. GET /auth/me - Current sign-in status

## Session Management

Sessions are stored in HTTP-only cookies. The session token is a signed JWT
carrying the Google account, the encrypted access token and the expiry.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from calendar_dashboard.api.dependencies import get_event_cache
from calendar_dashboard.auth.dependencies import get_session_optional, get_session_provider
from calendar_dashboard.auth.gate import DASHBOARD_PATH, ENTRY_PATH
from calendar_dashboard.auth.provider import SessionProvider
from calendar_dashboard.auth.session import SessionData
from calendar_dashboard.calendar.cache import EventCache
from calendar_dashboard.exceptions import OAuthStateError, SignOutError, TokenExchangeError

logger = logging.getLogger(__name__)

router = APIRouter()


class UserResponse(BaseModel):
    """Signed-in Google account."""

    id: str
    email: str | None
    name: str | None


class AuthStatusResponse(BaseModel):
    """Authentication status response."""

    authenticated: bool
    user: UserResponse | None = None


def _clear_session_cookie(response: RedirectResponse, provider: SessionProvider) -> None:
    settings = provider.settings
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


@router.get("/login")
async def login(
    provider: SessionProvider = Depends(get_session_provider),
) -> RedirectResponse:
    """Initiate Google OAuth login.

    Redirects the user to Google's consent screen. After consent,
    Google redirects back to /auth/callback.
    """
    if not provider.is_configured:
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="Google OAuth not configured",
        )

    return RedirectResponse(url=provider.sign_in_with_oauth())


@router.get("/callback")
async def oauth_callback(
    code: str | None = None,
    state: str | None = None,
    provider: SessionProvider = Depends(get_session_provider),
) -> RedirectResponse:
    """Handle Google OAuth callback.

    Exchanges the authorization code for a session and sets the session
    cookie. Without a code the browser is sent on to the dashboard, which
    gates it back to the entry view if there is no session.
    """
    settings = provider.settings
    redirect = RedirectResponse(url=DASHBOARD_PATH, status_code=status.HTTP_302_FOUND)

    if not code:
        return redirect

    if not state:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing state token",
        )

    try:
        session_token = await provider.exchange_code_for_session(code, state)
    except OAuthStateError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired state token",
        ) from e
    except TokenExchangeError as e:
        logger.error(f"Sign-in failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to exchange authorization code",
        ) from e

    redirect.set_cookie(
        key=settings.session_cookie_name,
        value=session_token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )

    return redirect


@router.post("/logout")
async def logout(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
    session: SessionData | None = Depends(get_session_optional),
    event_cache: EventCache = Depends(get_event_cache),
) -> RedirectResponse:
    """Sign out the current user.

    POST only, so a cross-site link cannot end the session.
    """
    token = request.cookies.get(provider.settings.session_cookie_name)
    notice = "signed_out"

    if session is not None:
        event_cache.discard(session.session_id)

    try:
        await provider.sign_out(token)
    except SignOutError as e:
        logger.error(f"Error signing out: {e}")
        notice = "signout_failed"

    # The cookie goes and the browser returns to the entry view either way
    response = RedirectResponse(
        url=f"{ENTRY_PATH}?notice={notice}",
        status_code=status.HTTP_303_SEE_OTHER,
    )
    _clear_session_cookie(response, provider)
    return response


@router.get("/me", response_model=AuthStatusResponse)
async def get_auth_status(
    session: SessionData | None = Depends(get_session_optional),
) -> AuthStatusResponse:
    """Get the current authentication status and user info."""
    if session:
        return AuthStatusResponse(
            authenticated=True,
            user=UserResponse(
                id=session.user_id,
                email=session.email,
                name=session.name,
            ),
        )

    return AuthStatusResponse(authenticated=False)
