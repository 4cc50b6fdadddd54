"""
Base exception classes for the EcoBazaar client.

The HTTP access layer classifies every failed call into one of these types.
Feature modules define their own exceptions that inherit from these bases.
"""

from typing import Optional, Any


class EcobazaarError(Exception):
    """
    Base exception for all client errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logging or display."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class TransportError(EcobazaarError):
    """No response reached the client (connection refused, timeout, DNS...)."""

    def __init__(self, message: str, method: str, path: str):
        super().__init__(
            f"Network error on {method} {path}: {message}",
            code="TRANSPORT_ERROR",
            details={"method": method, "path": path},
        )
        self.method = method
        self.path = path


class ApiError(EcobazaarError):
    """
    The backend answered with a non-success status.

    Carries the HTTP status and the parsed error payload (if any), so callers
    can surface the server-provided message.
    """

    def __init__(
        self,
        status: int,
        payload: Any = None,
        method: str = "",
        path: str = "",
        code: Optional[str] = None,
    ):
        server_message = payload_message(payload)
        message = server_message or f"HTTP {status} on {method} {path}".strip()
        super().__init__(
            message,
            code=code or "HTTP_ERROR",
            details={"status": status, "method": method, "path": path},
        )
        self.status = status
        self.payload = payload
        self.method = method
        self.path = path
        self.server_message = server_message


class AuthExpiredError(ApiError):
    """401: the session is no longer valid."""

    def __init__(self, payload: Any = None, method: str = "", path: str = ""):
        super().__init__(401, payload, method, path, code="AUTH_EXPIRED")


class ForbiddenError(ApiError):
    """403: valid session lacking permission for this resource."""

    def __init__(self, payload: Any = None, method: str = "", path: str = ""):
        super().__init__(403, payload, method, path, code="FORBIDDEN")


class ValidationError(ApiError):
    """Other 4xx: the server rejected the request, usually with a message."""

    def __init__(self, status: int, payload: Any = None, method: str = "", path: str = ""):
        super().__init__(status, payload, method, path, code="VALIDATION_ERROR")


class NotFoundError(ValidationError):
    """404: the route or resource does not exist."""

    def __init__(self, payload: Any = None, method: str = "", path: str = ""):
        super().__init__(404, payload, method, path)
        self.code = "NOT_FOUND"


class ServerError(ApiError):
    """5xx: the backend failed."""

    def __init__(self, status: int, payload: Any = None, method: str = "", path: str = ""):
        super().__init__(status, payload, method, path, code="SERVER_ERROR")


def payload_message(payload: Any) -> Optional[str]:
    """Pull a human-readable message out of a backend error payload."""
    if isinstance(payload, dict):
        for key in ("error", "message", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    elif isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None


def error_for_status(
    status: int,
    payload: Any = None,
    method: str = "",
    path: str = "",
) -> ApiError:
    """Build the exception matching an HTTP error status."""
    if status == 401:
        return AuthExpiredError(payload, method, path)
    if status == 403:
        return ForbiddenError(payload, method, path)
    if status == 404:
        return NotFoundError(payload, method, path)
    if 400 <= status < 500:
        return ValidationError(status, payload, method, path)
    if status >= 500:
        return ServerError(status, payload, method, path)
    return ApiError(status, payload, method, path)


def error_message(exc: BaseException, fallback: str) -> str:
    """
    Message to show a user for a failed action.

    Server-provided messages are surfaced verbatim for client errors.
    Server errors and transport failures use the fallback text.
    """
    if isinstance(exc, (ServerError, TransportError)):
        return fallback
    if isinstance(exc, ApiError):
        return exc.server_message or fallback
    if isinstance(exc, EcobazaarError):
        return exc.message or fallback
    return fallback
