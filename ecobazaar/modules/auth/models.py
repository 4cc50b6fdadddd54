"""
Authentication module data models.

These models define the session the client holds and the state it exposes
to consumers.
"""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field, field_validator


class UserRole(str, Enum):
    """Marketplace roles. Sellers and admins get their own panels."""

    USER = "USER"
    SELLER = "SELLER"
    ADMIN = "ADMIN"


class SessionStatus(str, Enum):
    """Session lifecycle states."""

    UNINITIALIZED = "uninitialized"
    RESTORING = "restoring"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class User(BaseModel):
    """
    The signed-in user as returned by the backend.

    Only `id` and `role` are interpreted by the client; any other profile
    fields (name, email, eco score...) are kept as-is.
    """

    id: Union[int, str] = Field(..., description="Backend user ID")
    role: UserRole = Field(default=UserRole.USER, description="Marketplace role")

    model_config = {
        "frozen": True,
        "extra": "allow",
    }

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value):
        if isinstance(value, str):
            value = value.strip().upper()
            if value.startswith("ROLE_"):
                value = value[len("ROLE_"):]
        return value

    def to_record(self) -> dict:
        """JSON-ready dict, extra profile fields included."""
        return self.model_dump(mode="json")

    def merged(self, patch: dict) -> "User":
        """Shallow merge of `patch` over this user's fields."""
        return User.model_validate({**self.to_record(), **patch})


class Session(BaseModel):
    """Token plus user. Only ever constructed when both are valid."""

    token: str = Field(..., min_length=1, description="Opaque bearer token")
    user: User

    model_config = {"frozen": True}


class SessionState(BaseModel):
    """Snapshot of the session for consumers."""

    user: Optional[User] = None
    loading: bool = False
    is_authenticated: bool = False
    status: SessionStatus = SessionStatus.UNINITIALIZED

    model_config = {"frozen": True}


class LoginRequest(BaseModel):
    """Credentials sent to POST /auth/login."""

    email: str
    password: str


class ResetPasswordRequest(BaseModel):
    """Body of POST /auth/reset-password."""

    token: str
    password: str
