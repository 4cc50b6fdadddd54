"""
Shared infrastructure for the EcoBazaar client.

This package contains cross-cutting concerns used by multiple modules:
- config: Centralized settings management
- storage: Persisted session store
- http: The HTTP access layer
- navigation: Current location and login redirects
- cache: Base class for per-user resource caches
- exceptions: Base exception classes

Note: Feature logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .exceptions import (
    EcobazaarError,
    TransportError,
    ApiError,
    AuthExpiredError,
    ForbiddenError,
    ValidationError,
    NotFoundError,
    ServerError,
    error_message,
)
from .http import ApiClient
from .models import ActionResult
from .navigation import INavigator, MemoryNavigator
from .storage import ISessionStorage, MemoryStorage, FileStorage, SessionStore

__all__ = [
    "Settings",
    "get_settings",
    "EcobazaarError",
    "TransportError",
    "ApiError",
    "AuthExpiredError",
    "ForbiddenError",
    "ValidationError",
    "NotFoundError",
    "ServerError",
    "error_message",
    "ApiClient",
    "ActionResult",
    "INavigator",
    "MemoryNavigator",
    "ISessionStorage",
    "MemoryStorage",
    "FileStorage",
    "SessionStore",
]
