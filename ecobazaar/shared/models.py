"""
Shared data models used across modules.

Module-specific models stay in their respective module directories.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    """
    Uniform outcome of a user-triggered action.

    Session and cache actions return this instead of raising, so callers can
    render `error` directly.
    """

    success: bool = Field(..., description="Whether the action succeeded")
    error: Optional[str] = Field(None, description="User-facing failure message")
    data: Any = Field(None, description="Action payload on success")

    model_config = {"frozen": True}

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)
