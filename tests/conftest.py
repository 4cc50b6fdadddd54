"""
Shared test fixtures and utilities.

The backend is replaced by FakeBackend, an httpx.MockTransport handler that
serves canned responses per (method, path) and records every request.
"""

import inspect
import json
from collections import deque
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from ecobazaar.client import StorefrontClient
from ecobazaar.modules.auth.service import SessionManager
from ecobazaar.modules.cart.service import CartCache
from ecobazaar.modules.catalog.service import ProductService
from ecobazaar.modules.wishlist.service import WishlistCache
from ecobazaar.shared.config import Settings
from ecobazaar.shared.http import ApiClient
from ecobazaar.shared.navigation import MemoryNavigator
from ecobazaar.shared.storage import MemoryStorage, SessionStore


API_BASE = "http://test.local/api"
API_PREFIX = "/api"

Responder = Union[tuple[int, Any], Callable[[httpx.Request], Any]]


class FakeBackend:
    """
    Canned backend for httpx.MockTransport.

    Register responses with `on(method, path, *responses)`. Each response is
    either a (status, json_body) tuple or a callable taking the request and
    returning an httpx.Response (sync or async). Several responses are served
    in order; the last one repeats. Unregistered routes answer 404.
    """

    def __init__(self):
        self._routes: dict[tuple[str, str], deque] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, *responses: Responder) -> "FakeBackend":
        self._routes[(method.upper(), path)] = deque(responses)
        return self

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if (method is None or r.method == method.upper())
            and (path is None or _route_path(r) == path)
        ]

    def describe_calls(self) -> list[str]:
        return [f"{r.method} {_route_path(r)}" for r in self.requests]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, _route_path(request)))
        if not queue:
            return httpx.Response(404, json={"error": "Not found"})
        responder = queue.popleft() if len(queue) > 1 else queue[0]

        if callable(responder):
            result = responder(request)
            if inspect.isawaitable(result):
                result = await result
            if isinstance(result, httpx.Response):
                return result
            status, body = result
        else:
            status, body = responder
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


def _route_path(request: httpx.Request) -> str:
    path = request.url.path
    if path.startswith(API_PREFIX):
        path = path[len(API_PREFIX):]
    return path or "/"


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


def seed_session(storage: MemoryStorage, settings: Settings, token: str, user: Any) -> None:
    """Write a persisted session the way a previous process would have."""
    storage.set_item(settings.token_storage_key, token)
    storage.set_item(
        settings.user_storage_key, user if isinstance(user, str) else json.dumps(user)
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at the fake backend, with no transport retries."""
    return Settings(
        api_base=API_BASE,
        network_retries=0,
        session_file=tmp_path / "session.json",
        wishlist_hydrate_products=False,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage, settings) -> SessionStore:
    return SessionStore(storage, settings)


@pytest.fixture
def navigator() -> MemoryNavigator:
    """User starts on a page that requires a session."""
    return MemoryNavigator("/products/7")


@pytest.fixture
def api(store, settings, navigator, backend) -> ApiClient:
    return ApiClient(store, settings, navigator, backend.transport)


@pytest.fixture
def session(api, store) -> SessionManager:
    return SessionManager(api, store)


@pytest.fixture
def products(api) -> ProductService:
    return ProductService(api)


@pytest.fixture
def cart(api, session) -> CartCache:
    return CartCache(api, session)


@pytest.fixture
def wishlist(api, session, products, settings) -> WishlistCache:
    return WishlistCache(api, session, products, settings)


@pytest.fixture
def client(settings, storage, navigator, backend) -> StorefrontClient:
    return StorefrontClient(settings, storage, navigator, backend.transport)


@pytest.fixture
def test_user() -> dict:
    return {"id": 1, "role": "USER", "name": "Alice", "email": "a@x.com"}


@pytest.fixture
def signed_in(storage, settings, test_user) -> dict:
    """Persist a valid session for `test_user` before anything restores it."""
    seed_session(storage, settings, "t1", test_user)
    return test_user
