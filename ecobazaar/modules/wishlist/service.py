"""
Wishlist cache implementation.
"""

import logging
from collections import deque
from typing import Any, Optional, Union

from ecobazaar.modules.catalog.interfaces import IProductService
from ecobazaar.modules.catalog.models import Product
from ecobazaar.modules.catalog.service import ProductService
from ecobazaar.shared.cache import ISessionProvider, ResourceCache
from ecobazaar.shared.config import Settings, get_settings
from ecobazaar.shared.http import ApiClient, gather_settled
from ecobazaar.shared.models import ActionResult

from .endpoints import (
    CandidateAttempt,
    EndpointResolver,
    RequestShape,
    wishlist_removal_resolver,
)
from .exceptions import (
    InvalidWishlistEntryError,
    RemovalNotConfirmedError,
    WishlistEntryNotFoundError,
)
from .interfaces import IWishlistCache
from .models import (
    AddWishlistRequest,
    BareEntry,
    ProductEntry,
    WishlistState,
    entry_matches,
    parse_entry,
    product_id_of,
)

logger = logging.getLogger(__name__)

Entry = Union[BareEntry, ProductEntry]


class WishlistCache(ResourceCache[list[Entry]], IWishlistCache):
    """
    The current user's wishlist.

    Bare entries are hydrated with product details on load when
    `wishlist_hydrate_products` is set; a failed lookup keeps the bare entry.
    """

    resource_name = "wishlist"
    login_required_message = "Please log in to manage your wishlist"
    load_error_message = "Failed to load wishlist"

    def __init__(
        self,
        api: ApiClient,
        session: ISessionProvider,
        products: Optional[IProductService] = None,
        settings: Optional[Settings] = None,
        resolver: Optional[EndpointResolver] = None,
    ):
        self._settings = settings or get_settings()
        self._products = products or ProductService(api)
        self._resolver = resolver or wishlist_removal_resolver()
        self._trace: deque[CandidateAttempt] = deque(maxlen=self._settings.wishlist_trace_size)
        super().__init__(api, session)

    def _empty(self) -> list[Entry]:
        return []

    @property
    def wishlist(self) -> list[Entry]:
        return list(self._value or [])

    @property
    def state(self) -> WishlistState:
        return WishlistState(wishlist=self.wishlist, loading=self.loading, error=self._error)

    @property
    def debug_trace(self) -> list[CandidateAttempt]:
        return list(self._trace)

    async def _fetch(self, user_id: Any) -> list[Entry]:
        payload = await self._api.get(f"/wishlist/{user_id}")
        if isinstance(payload, dict):
            payload = payload.get("items") or payload.get("content") or []

        entries: list[Entry] = []
        for raw in payload or []:
            try:
                entries.append(parse_entry(raw))
            except InvalidWishlistEntryError as e:
                logger.warning(f"Skipping wishlist entry: {e.message}")

        if self._settings.wishlist_hydrate_products:
            entries = await self._hydrate(entries)
        return entries

    async def _hydrate(self, entries: list[Entry]) -> list[Entry]:
        bare = [e for e in entries if isinstance(e, BareEntry)]
        if not bare:
            return entries

        results = await gather_settled(*(self._products.get_by_id(e.product_id) for e in bare))
        products: dict[int, Product] = {}
        for entry, result in zip(bare, results):
            if isinstance(result, Product):
                products[id(entry)] = result
            elif isinstance(result, BaseException):
                logger.error(f"Failed to fetch product {entry.product_id}: {result}")

        hydrated: list[Entry] = []
        for entry in entries:
            product = products.get(id(entry))
            if product is not None:
                entry = ProductEntry(
                    entry_id=entry.entry_id, product_id=entry.product_id, product=product
                )
            hydrated.append(entry)
        return hydrated

    def contains(self, product_id: Union[int, str]) -> bool:
        return any(entry_matches(entry, product_id) for entry in self._value or [])

    def find_entry(self, entry_id: Union[int, str]) -> Optional[Entry]:
        for entry in self._value or []:
            if entry.entry_id is not None and str(entry.entry_id) == str(entry_id):
                return entry
        return None

    def get_entry_product(self, entry_id: Union[int, str]) -> Optional[Product]:
        entry = self.find_entry(entry_id)
        if isinstance(entry, ProductEntry):
            return entry.product
        return None

    async def add(self, product_id: Union[int, str]) -> ActionResult:
        async def add(user_id: Any) -> Any:
            body = AddWishlistRequest(product_id=product_id).model_dump(by_alias=True)
            return await self._api.post(f"/wishlist/{user_id}", body)

        return await self._mutate(add, "Failed to update wishlist")

    async def remove(self, product_id: Union[int, str]) -> ActionResult:
        async def remove(user_id: Any) -> Any:
            resolution = await self._resolver.resolve(
                self._send,
                observer=self._trace.append,
                user_id=user_id,
                product_id=product_id,
            )
            return resolution.response

        result = await self._mutate(remove, "Failed to remove from wishlist")
        if result.success and self._settings.wishlist_verify_removal and self.contains(product_id):
            error = RemovalNotConfirmedError(product_id)
            logger.warning(f"{error.message}: product {product_id}")
            self._error = error.message
            return ActionResult.fail(error.message)
        return result

    async def toggle(self, product_id: Union[int, str]) -> ActionResult:
        if self._session.user is None:
            self._error = self.login_required_message
            return ActionResult.fail(self.login_required_message)
        if self.contains(product_id):
            logger.debug(f"Removing product from wishlist: {product_id}")
            return await self.remove(product_id)
        logger.debug(f"Adding product to wishlist: {product_id}")
        return await self.add(product_id)

    def require_entry(self, entry_id: Union[int, str]) -> Entry:
        """
        Raises:
            WishlistEntryNotFoundError: The entry is not in the cached wishlist
        """
        entry = self.find_entry(entry_id)
        if entry is None:
            raise WishlistEntryNotFoundError(entry_id)
        return entry

    async def remove_entry(self, entry_id: Union[int, str]) -> ActionResult:
        if self._session.user is None:
            self._error = self.login_required_message
            return ActionResult.fail(self.login_required_message)
        try:
            entry = self.require_entry(entry_id)
        except WishlistEntryNotFoundError as e:
            self._error = e.message
            return ActionResult.fail(e.message)
        return await self.remove(product_id_of(entry))

    async def _send(self, request: RequestShape) -> Any:
        return await self._api.send(
            request.method, request.path, body=request.body, query=request.query
        )
