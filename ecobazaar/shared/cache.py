"""
Base class for per-user resource caches.

A resource cache is an in-memory projection of a collection the server holds
for the current user (cart, wishlist). It never patches itself: every
mutation goes to the server and is followed by a full reload.
"""

import logging
from typing import Any, Awaitable, Callable, Generic, Optional, Protocol, TypeVar

from pydantic import ValidationError as ModelValidationError

from .exceptions import EcobazaarError, error_message
from .http import ApiClient, is_auth_failure
from .models import ActionResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

UserListener = Callable[[Any], None]


class ISessionProvider(Protocol):
    """What a cache needs to know about the session."""

    @property
    def started(self) -> bool:
        """True once session restoration has begun."""
        ...

    @property
    def user(self) -> Any:
        """Current user (with an `id`), or None."""
        ...

    async def wait_ready(self) -> None:
        """Resolve once restoration has settled."""
        ...

    def subscribe(self, listener: UserListener) -> Callable[[], None]:
        """Call `listener(user)` whenever the session identity changes."""
        ...


class ResourceCache(Generic[T]):
    """
    Common load/mutate behaviour for Cart and Wishlist.

    Each load carries the cache generation it started in. Identity changes
    (login as someone else, logout, forced teardown) bump the generation, so
    a response that arrives for a superseded user is dropped instead of
    overwriting newer state.

    Subclasses implement `_fetch` and may override `_empty`.
    """

    resource_name = "resource"
    login_required_message = "Please login first"
    load_error_message = "Failed to load resource"

    def __init__(self, api: ApiClient, session: ISessionProvider):
        self._api = api
        self._session = session
        self._value: Optional[T] = self._empty()
        self._error: Optional[str] = None
        self._inflight = 0
        self._generation = 0
        self._unsubscribe = session.subscribe(self._on_user_changed)

    @property
    def loading(self) -> bool:
        return self._inflight > 0

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def generation(self) -> int:
        return self._generation

    def _empty(self) -> Optional[T]:
        return None

    async def _fetch(self, user_id: Any) -> T:
        raise NotImplementedError

    def _on_user_changed(self, user: Any) -> None:
        self.invalidate()

    def invalidate(self) -> None:
        """Drop cached data and any in-flight load results."""
        self._generation += 1
        self._value = self._empty()
        self._error = None

    def clear(self) -> None:
        self.invalidate()

    def clear_error(self) -> None:
        self._error = None

    def _is_stale(self, generation: int, user_id: Any) -> bool:
        user = self._session.user
        return generation != self._generation or user is None or user.id != user_id

    async def load(self) -> None:
        """
        Replace the cache with the server's current collection.

        No-op while there is no authenticated user. 401/403 leave an empty
        cache and no error; other failures leave an empty cache and set
        `error`.
        """
        if not self._session.started:
            return
        await self._session.wait_ready()
        user = self._session.user
        if user is None:
            return

        generation = self._generation
        user_id = user.id
        self._inflight += 1
        self._error = None
        try:
            value = await self._fetch(user_id)
        except (EcobazaarError, ModelValidationError) as e:
            if self._is_stale(generation, user_id):
                logger.debug(f"Dropping failed {self.resource_name} load for superseded user {user_id}")
                return
            self._value = self._empty()
            if is_auth_failure(e):
                logger.warning(f"{self.resource_name} access denied - user may need to re-login")
                self._error = None
            else:
                logger.error(f"Failed to load {self.resource_name}: {e}")
                self._error = self.load_error_message
            return
        finally:
            self._inflight -= 1

        if self._is_stale(generation, user_id):
            logger.info(f"Discarding stale {self.resource_name} for user {user_id}")
            return
        self._value = value

    async def refresh(self) -> None:
        await self.load()

    async def _mutate(
        self,
        operation: Callable[[Any], Awaitable[Any]],
        fallback: str,
    ) -> ActionResult:
        """
        Run a server-side mutation for the current user, then reload.

        The reload starts only after the mutation settled. A failed mutation
        leaves the cache untouched.
        """
        user = self._session.user
        if user is None:
            return ActionResult.fail(self.login_required_message)

        self._error = None
        try:
            data = await operation(user.id)
        except (EcobazaarError, ModelValidationError) as e:
            message = error_message(e, fallback)
            logger.warning(f"{self.resource_name} update failed: {e}")
            if not (is_auth_failure(e) and self._session.user is None):
                # After a forced teardown the cache stays empty and error-free.
                self._error = message
            return ActionResult.fail(message)

        await self.load()
        return ActionResult.ok(data)
