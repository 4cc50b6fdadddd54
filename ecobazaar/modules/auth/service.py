"""
Session manager implementation.

Owns the authenticated identity: restores it from the persisted store at
startup, creates it on login/registration, and tears it down on logout or
when the HTTP access layer reports a 401.
"""

import asyncio
import json
import logging
from typing import Any, Callable, Optional

from pydantic import ValidationError as ModelValidationError

from ecobazaar.shared.exceptions import EcobazaarError, error_message, payload_message
from ecobazaar.shared.http import ApiClient
from ecobazaar.shared.models import ActionResult
from ecobazaar.shared.storage import SessionStore

from .exceptions import CorruptedSessionError, IncompleteAuthResponseError, NotAuthenticatedError
from .interfaces import ISessionManager
from .models import (
    LoginRequest,
    ResetPasswordRequest,
    Session,
    SessionState,
    SessionStatus,
    User,
)

logger = logging.getLogger(__name__)

UserListener = Callable[[Optional[User]], None]


def parse_persisted_user(raw: str) -> User:
    """
    Decode the persisted user record.

    Raises:
        CorruptedSessionError: The record is not JSON or not a valid user
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise CorruptedSessionError(f"user record is not JSON ({e})")
    if not isinstance(data, dict):
        raise CorruptedSessionError("user record is not an object")
    try:
        return User.model_validate(data)
    except ModelValidationError as e:
        raise CorruptedSessionError(f"user record is invalid ({e.error_count()} errors)")


def session_from_payload(payload: Any) -> tuple[Session, dict]:
    """
    Build a Session from a login/registration response.

    Returns:
        The session and the raw user dict as the backend sent it

    Raises:
        IncompleteAuthResponseError: Token or user missing or malformed
    """
    if not isinstance(payload, dict):
        raise IncompleteAuthResponseError()
    token = payload.get("token")
    raw_user = payload.get("user")
    missing = [name for name, value in (("token", token), ("user", raw_user)) if not value]
    if missing:
        raise IncompleteAuthResponseError(payload_message(payload), missing)
    if not isinstance(token, str) or not isinstance(raw_user, dict):
        raise IncompleteAuthResponseError(missing=["token" if not isinstance(token, str) else "user"])
    try:
        user = User.model_validate(raw_user)
    except ModelValidationError:
        raise IncompleteAuthResponseError("Login failed - invalid user data", ["user"])
    return Session(token=token, user=user), raw_user


class SessionManager(ISessionManager):
    """
    Single writer of session state.

    In-memory and persisted copies of the session always change together.
    Listeners are told about identity changes (a different user, or none),
    not about profile edits.
    """

    def __init__(self, api: ApiClient, store: Optional[SessionStore] = None):
        self._api = api
        self._store = store or api.store
        self._session: Optional[Session] = None
        self._status = SessionStatus.UNINITIALIZED
        self._ready = asyncio.Event()
        self._listeners: list[UserListener] = []
        api.on_unauthorized(self._on_forced_teardown)

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def started(self) -> bool:
        return self._status is not SessionStatus.UNINITIALIZED

    @property
    def loading(self) -> bool:
        return self._status in (SessionStatus.UNINITIALIZED, SessionStatus.RESTORING)

    @property
    def user(self) -> Optional[User]:
        return self._session.user if self._session else None

    @property
    def token(self) -> Optional[str]:
        return self._session.token if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def state(self) -> SessionState:
        return SessionState(
            user=self.user,
            loading=self.loading,
            is_authenticated=self.is_authenticated,
            status=self._status,
        )

    def subscribe(self, listener: UserListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_session(self, session: Optional[Session]) -> None:
        previous = self.user
        self._session = session
        self._status = SessionStatus.AUTHENTICATED if session else SessionStatus.ANONYMOUS
        current = self.user
        if (previous is None) != (current is None) or (
            previous is not None and current is not None and previous.id != current.id
        ):
            for listener in list(self._listeners):
                listener(current)

    async def restore(self) -> SessionState:
        if self._status is not SessionStatus.UNINITIALIZED:
            await self._ready.wait()
            return self.state

        self._status = SessionStatus.RESTORING
        try:
            token, raw_user = self._store.read()
            if token and raw_user:
                try:
                    user = parse_persisted_user(raw_user)
                except CorruptedSessionError as e:
                    logger.error(f"Failed to parse saved user data: {e}")
                    self._store.clear()
                    self._set_session(None)
                else:
                    logger.debug(f"Restored session for user {user.id}")
                    self._set_session(Session(token=token, user=user))
            else:
                logger.debug("No saved auth data found")
                self._set_session(None)
        finally:
            if self._status is SessionStatus.RESTORING:
                self._status = SessionStatus.ANONYMOUS
            self._ready.set()
        return self.state

    async def wait_ready(self) -> None:
        await self._ready.wait()

    def _mark_ready(self) -> None:
        if not self._ready.is_set():
            self._ready.set()

    def _adopt(self, session: Session, raw_user: dict) -> None:
        self._store.save(session.token, raw_user)
        self._set_session(session)
        self._mark_ready()

    async def login(self, email: str, password: str) -> ActionResult:
        request = LoginRequest(email=email, password=password)
        try:
            payload = await self._api.post("/auth/login", request.model_dump())
        except EcobazaarError as e:
            logger.error(f"Login error: {e}")
            return ActionResult.fail(error_message(e, "Login failed"))

        try:
            session, raw_user = session_from_payload(payload)
        except IncompleteAuthResponseError as e:
            logger.error(f"Login response missing token or user: {e.details}")
            return ActionResult.fail(e.message)

        try:
            self._adopt(session, raw_user)
        except OSError as e:
            logger.error(f"Failed to persist session: {e}")
            return ActionResult.fail("Login failed")
        logger.info(f"Logged in as user {session.user.id}")
        return ActionResult.ok(session.user)

    async def register(self, profile: dict[str, Any]) -> ActionResult:
        try:
            payload = await self._api.post("/auth/register", profile)
        except EcobazaarError as e:
            logger.error(f"Registration error: {e}")
            return ActionResult.fail(error_message(e, "Registration failed"))

        if isinstance(payload, dict) and payload.get("token") and payload.get("user"):
            try:
                session, raw_user = session_from_payload(payload)
                self._adopt(session, raw_user)
            except IncompleteAuthResponseError as e:
                return ActionResult.fail(e.message)
            except OSError as e:
                logger.error(f"Failed to persist session: {e}")
                return ActionResult.fail("Registration failed")
            return ActionResult.ok(session.user)

        logger.info("Registration succeeded but no token provided")
        return ActionResult.ok(payload)

    def logout(self) -> None:
        self._store.clear()
        self._set_session(None)
        self._mark_ready()
        logger.info("Logout complete")

    def _on_forced_teardown(self) -> None:
        # The HTTP layer has already cleared the persisted store.
        self._set_session(None)
        self._mark_ready()

    def update_user(self, patch: dict[str, Any]) -> User:
        """
        Merge `patch` into the current user.

        The persisted copy is written first; if that fails the in-memory copy
        is left as it was.

        Raises:
            NotAuthenticatedError: No user is signed in
            pydantic.ValidationError: The merged record is not a valid user
        """
        if self._session is None:
            raise NotAuthenticatedError("Cannot update user without a session")
        current = self._session.user
        merged = current.merged(patch)
        self._store.save_user(merged.to_record())
        self._session = Session(token=self._session.token, user=merged)
        if merged.id != current.id:
            for listener in list(self._listeners):
                listener(merged)
        return merged

    async def forgot_password(self, email: str) -> ActionResult:
        try:
            payload = await self._api.post("/auth/forgot-password", {"email": email})
        except EcobazaarError as e:
            return ActionResult.fail(
                error_message(e, "Failed to send reset email. Please try again.")
            )
        return ActionResult.ok(payload)

    async def reset_password(self, token: str, password: str) -> ActionResult:
        request = ResetPasswordRequest(token=token, password=password)
        try:
            payload = await self._api.post("/auth/reset-password", request.model_dump())
        except EcobazaarError as e:
            return ActionResult.fail(error_message(e, "Failed to reset password"))
        return ActionResult.ok(payload)

    async def validate_token(self, token: str) -> ActionResult:
        """Ask the backend whether a (reset or session) token is still valid."""
        try:
            payload = await self._api.get(f"/auth/validate-token/{token}")
        except EcobazaarError as e:
            return ActionResult.fail(error_message(e, "Invalid or expired token"))
        return ActionResult.ok(payload)

    async def get_allowed_roles(self) -> list[str]:
        """Roles a new account may register with."""
        payload = await self._api.get("/auth/allowed-roles")
        if isinstance(payload, dict):
            payload = payload.get("roles", [])
        return [str(role) for role in payload or []]
