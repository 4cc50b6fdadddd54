"""
Authentication module.

Handles the session lifecycle: restore on startup, login/register, logout,
profile updates and forced teardown after a 401.

Public API:
- ISessionManager: Interface for session operations
- SessionManager: The implementation
- User, Session, SessionState, SessionStatus, UserRole: Models
- Session exceptions: CorruptedSessionError, IncompleteAuthResponseError, etc.
"""

from .interfaces import ISessionManager
from .models import (
    User,
    UserRole,
    Session,
    SessionState,
    SessionStatus,
    LoginRequest,
    ResetPasswordRequest,
)
from .exceptions import (
    SessionError,
    CorruptedSessionError,
    IncompleteAuthResponseError,
    NotAuthenticatedError,
)
from .service import SessionManager, parse_persisted_user, session_from_payload

__all__ = [
    # Interface
    "ISessionManager",
    # Models
    "User",
    "UserRole",
    "Session",
    "SessionState",
    "SessionStatus",
    "LoginRequest",
    "ResetPasswordRequest",
    # Exceptions
    "SessionError",
    "CorruptedSessionError",
    "IncompleteAuthResponseError",
    "NotAuthenticatedError",
    # Service
    "SessionManager",
    "parse_persisted_user",
    "session_from_payload",
]
