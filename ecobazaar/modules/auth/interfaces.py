"""
Authentication module interface.

Caches and the client facade depend on ISessionManager, not on the concrete
implementation. This enables testing with fakes.
"""

from typing import Any, Callable, Optional, Protocol, runtime_checkable

from ecobazaar.shared.models import ActionResult

from .models import SessionState, SessionStatus, User


@runtime_checkable
class ISessionManager(Protocol):
    """
    Interface for the authenticated session.

    The session manager is the single writer of session state. Everything
    else reads it through these properties or subscribes to identity changes.
    """

    @property
    def status(self) -> SessionStatus:
        ...

    @property
    def started(self) -> bool:
        ...

    @property
    def user(self) -> Optional[User]:
        ...

    @property
    def token(self) -> Optional[str]:
        ...

    @property
    def state(self) -> SessionState:
        ...

    async def restore(self) -> SessionState:
        """
        Restore the session from persisted storage.

        Runs once; later calls return the current state. Corrupted data is
        purged and yields an anonymous session.
        """
        ...

    async def wait_ready(self) -> None:
        """Wait until restoration has settled."""
        ...

    async def login(self, email: str, password: str) -> ActionResult:
        """
        Authenticate with email and password.

        Returns:
            ActionResult whose `data` is the User on success. Never raises.
        """
        ...

    async def register(self, profile: dict[str, Any]) -> ActionResult:
        """
        Create an account.

        Returns:
            ActionResult with the User when the backend signs the new account
            in, or the raw response payload when it does not.
        """
        ...

    def logout(self) -> None:
        """Clear the session. Idempotent."""
        ...

    def update_user(self, patch: dict[str, Any]) -> User:
        """Merge `patch` into the current user, in memory and persisted."""
        ...

    def subscribe(self, listener: Callable[[Optional[User]], None]) -> Callable[[], None]:
        """Be told about identity changes. Returns an unsubscribe callable."""
        ...
