"""
HTTP access layer.

ApiClient is the only gateway to the backend. It attaches the bearer token
from the persisted session store, classifies failures into the shared
exception types, and reacts to authorization failures:

- 401 tears down the session (persisted store and in-memory listeners) and
  redirects to the login route unless the user is on a public page.
- 403 is logged and propagated; the session is left alone.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import httpx

from .config import Settings, get_settings
from .exceptions import ApiError, AuthExpiredError, TransportError, error_for_status
from .navigation import INavigator, MemoryNavigator, is_public_path
from .storage import SessionStore

logger = logging.getLogger(__name__)

UnauthorizedHandler = Callable[[], None]


class ApiClient:
    """
    Async JSON client for the storefront backend.

    Args:
        store: Persisted session store the bearer token is read from
        settings: Client settings (base URL, timeout, routes)
        navigator: Where the user currently is; receives login redirects
        transport: Optional httpx transport (tests inject httpx.MockTransport)
    """

    def __init__(
        self,
        store: SessionStore,
        settings: Optional[Settings] = None,
        navigator: Optional[INavigator] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings or get_settings()
        self._store = store
        self._navigator = navigator or MemoryNavigator()
        self._unauthorized_handlers: list[UnauthorizedHandler] = []
        self._client = httpx.AsyncClient(
            base_url=self._settings.api_base.rstrip("/"),
            timeout=self._settings.request_timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @property
    def navigator(self) -> INavigator:
        return self._navigator

    @property
    def store(self) -> SessionStore:
        return self._store

    def on_unauthorized(self, handler: UnauthorizedHandler) -> None:
        """Register a callback run when a 401 forces session teardown."""
        self._unauthorized_handlers.append(handler)

    async def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        query: Optional[dict[str, Any]] = None,
        *,
        retry: bool = False,
    ) -> Any:
        """
        Perform one logical API call and return the decoded JSON payload.

        Args:
            method: HTTP method
            path: Path relative to the configured API base
            body: JSON body, if any
            query: Query parameters, if any
            retry: Mark the call as a retry of an earlier call. A 401 on a
                   retry does not tear the session down again.

        Returns:
            Decoded JSON body, the raw text for non-JSON bodies, or None

        Raises:
            TransportError: No response was received
            ApiError: The backend answered with an error status (subclass
                      per status family)
        """
        method = method.upper()
        attempts = 1 + (max(0, self._settings.network_retries) if method == "GET" else 0)

        for attempt in range(attempts):
            token = self._store.token
            headers = {"Authorization": f"Bearer {token}"} if token else {}
            try:
                response = await self._client.request(
                    method,
                    path,
                    json=body,
                    params=_clean_query(query),
                    headers=headers,
                )
            except httpx.TransportError as e:
                logger.warning(f"{method} {path} failed (attempt {attempt + 1}/{attempts}): {e}")
                if attempt + 1 < attempts:
                    continue
                raise TransportError(str(e) or e.__class__.__name__, method, path) from e

            if response.is_success:
                return _decode(response)

            error = error_for_status(response.status_code, _decode(response), method, path)
            if isinstance(error, AuthExpiredError):
                if not retry:
                    self._handle_unauthorized(token)
            elif error.status == 403:
                logger.warning(f"Access forbidden (403) for: {method} {path}")
            raise error

    async def get(self, path: str, query: Optional[dict[str, Any]] = None) -> Any:
        return await self.send("GET", path, query=query)

    async def post(self, path: str, body: Any = None, query: Optional[dict[str, Any]] = None) -> Any:
        return await self.send("POST", path, body=body, query=query)

    async def put(self, path: str, body: Any = None, query: Optional[dict[str, Any]] = None) -> Any:
        return await self.send("PUT", path, body=body, query=query)

    async def delete(self, path: str, body: Any = None, query: Optional[dict[str, Any]] = None) -> Any:
        return await self.send("DELETE", path, body=body, query=query)

    def _handle_unauthorized(self, sent_token: Optional[str]) -> None:
        """Forced teardown after a 401."""
        current = self._store.token
        if sent_token and current != sent_token:
            # The request ran under a session that has since been replaced
            # or already torn down.
            logger.debug("Ignoring 401 for a session that is no longer current")
            return

        if sent_token:
            logger.warning("Authentication failed (401), logging out...")
            self._store.clear()
            for handler in list(self._unauthorized_handlers):
                handler()

        path = self._navigator.current_path
        if not is_public_path(path, self._settings.public_routes):
            self._navigator.navigate(self._settings.login_route)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def _clean_query(query: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    if not query:
        return None
    return {k: v for k, v in query.items() if v is not None}


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def is_auth_failure(exc: BaseException) -> bool:
    """True for 401/403, which read paths treat as "nothing to show"."""
    return isinstance(exc, ApiError) and exc.status in (401, 403)


async def gather_settled(*aws) -> list[Any]:
    """asyncio.gather that returns exceptions in place of results."""
    return await asyncio.gather(*aws, return_exceptions=True)
