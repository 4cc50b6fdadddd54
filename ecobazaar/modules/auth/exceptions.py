"""
Authentication module exceptions.

These never reach callers of SessionManager actions; they are converted to
ActionResult failures or handled during restoration.
"""

from typing import Optional

from ecobazaar.shared.exceptions import EcobazaarError


class SessionError(EcobazaarError):
    """Base exception for session-related errors."""

    pass


class CorruptedSessionError(SessionError):
    """Raised when the persisted user record cannot be trusted."""

    def __init__(self, reason: str):
        super().__init__(
            f"Persisted session is corrupted: {reason}",
            code="CORRUPTED_SESSION",
            details={"reason": reason},
        )


class IncompleteAuthResponseError(SessionError):
    """Raised when an auth response lacks a token or a valid user."""

    def __init__(self, message: Optional[str] = None, missing: Optional[list[str]] = None):
        super().__init__(
            message or "Login failed - no token received",
            code="INCOMPLETE_AUTH_RESPONSE",
            details={"missing": missing or []},
        )


class NotAuthenticatedError(SessionError):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self, message: str = "Not logged in"):
        super().__init__(message, code="NOT_AUTHENTICATED")
