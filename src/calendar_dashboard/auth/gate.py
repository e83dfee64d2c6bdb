"""Session gate.

Decides whether a request is signed in. Pages use the result to redirect:
unauthenticated visitors go to the entry view, signed-in visitors on the
entry view go to the dashboard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from calendar_dashboard.auth.provider import SessionProvider
from calendar_dashboard.auth.session import SessionData

logger = logging.getLogger(__name__)

ENTRY_PATH = "/"
DASHBOARD_PATH = "/dashboard"


@dataclass(frozen=True)
class SessionGateResult:
    """Outcome of a session check."""

    authenticated: bool
    provider_token: str | None = None
    session: SessionData | None = None

    @classmethod
    def unauthenticated(cls) -> SessionGateResult:
        return cls(authenticated=False)


def check_session(provider: SessionProvider, session_token: str | None) -> SessionGateResult:
    """Check for a signed-in session.

    A failing lookup counts as unauthenticated; it is never retried.
    """
    try:
        session = provider.get_session(session_token)
    except Exception:
        logger.exception("Session lookup failed")
        return SessionGateResult.unauthenticated()

    if session is None:
        return SessionGateResult.unauthenticated()

    return SessionGateResult(
        authenticated=True,
        provider_token=session.provider_token,
        session=session,
    )


def redirect_target(result: SessionGateResult, current_path: str) -> str | None:
    """Where the gate sends a request, or None to stay on ``current_path``."""
    if not result.authenticated and current_path != ENTRY_PATH:
        return ENTRY_PATH
    if result.authenticated and current_path == ENTRY_PATH:
        return DASHBOARD_PATH
    return None
