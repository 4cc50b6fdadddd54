"""
Storefront client facade.

Wires the persisted session store, HTTP access layer, session manager,
catalog and per-user caches into one object, passed explicitly to whatever
renders state.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from .modules.auth.service import SessionManager
from .modules.cart.service import CartCache
from .modules.catalog.service import ProductService
from .modules.wishlist.service import WishlistCache
from .shared.config import Settings, get_settings
from .shared.http import ApiClient
from .shared.models import ActionResult
from .shared.navigation import INavigator
from .shared.storage import ISessionStorage, SessionStore

logger = logging.getLogger(__name__)


class StorefrontClient:
    """
    One client per end-user context.

    Usage:
        async with StorefrontClient(storage=FileStorage(path)) as client:
            await client.start()
            await client.cart.add_to_cart(product_id=7)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: Optional[ISessionStorage] = None,
        navigator: Optional[INavigator] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.store = SessionStore(storage, self.settings)
        self.api = ApiClient(self.store, self.settings, navigator, transport)
        self.session = SessionManager(self.api, self.store)
        self.products = ProductService(self.api)
        self.cart = CartCache(self.api, self.session)
        self.wishlist = WishlistCache(self.api, self.session, self.products, self.settings)

    async def start(self) -> None:
        """Restore the persisted session, then load the caches for its user."""
        await self.session.restore()
        await self.refresh()

    async def refresh(self) -> None:
        """Reload cart and wishlist. No-op for an anonymous session."""
        await asyncio.gather(self.cart.load(), self.wishlist.load())

    async def login(self, email: str, password: str) -> ActionResult:
        result = await self.session.login(email, password)
        if result.success:
            await self.refresh()
        return result

    async def register(self, profile: dict[str, Any]) -> ActionResult:
        result = await self.session.register(profile)
        if result.success and self.session.is_authenticated:
            await self.refresh()
        return result

    def logout(self) -> None:
        # Caches clear themselves through the session subscription.
        self.session.logout()

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> "StorefrontClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
