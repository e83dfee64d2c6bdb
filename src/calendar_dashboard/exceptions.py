"""Dashboard exceptions."""

from __future__ import annotations


class DashboardError(Exception):
    """Base exception for calendar dashboard errors."""

    pass


class AuthError(DashboardError):
    """Base exception for sign-in and session errors."""

    pass


class NoSessionError(AuthError):
    """Raised when an operation needs a session and there is none."""

    def __init__(self, message: str = "No active session"):
        super().__init__(message)


class OAuthStateError(AuthError):
    """Raised when the OAuth state parameter is unknown or expired."""

    pass


class TokenExchangeError(AuthError):
    """Raised when the authorization code cannot be exchanged for tokens."""

    pass


class SignOutError(AuthError):
    """Raised when the identity provider refuses to revoke the session."""

    pass


class CalendarFetchError(DashboardError):
    """Raised when the calendar listing request fails.

    ``status_code`` is None for transport failures (DNS, timeouts, resets).
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
