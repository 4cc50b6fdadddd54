"""
Cart cache implementation.
"""

import logging
from typing import Any, Optional, Union

from ecobazaar.shared.cache import ResourceCache
from ecobazaar.shared.models import ActionResult
from ecobazaar.modules.auth.exceptions import NotAuthenticatedError

from .interfaces import ICartCache
from .models import AddCartItemRequest, Cart, CartState

logger = logging.getLogger(__name__)


class CartCache(ResourceCache[Cart], ICartCache):
    """
    The current user's cart.

    `cart` is None whenever no user is signed in or the last load failed.
    """

    resource_name = "cart"
    login_required_message = "Please login first"
    load_error_message = "Failed to load cart"

    @property
    def cart(self) -> Optional[Cart]:
        return self._value

    @property
    def state(self) -> CartState:
        return CartState(cart=self._value, loading=self.loading, error=self._error)

    @property
    def item_count(self) -> int:
        return self._value.item_count if self._value else 0

    async def _fetch(self, user_id: Any) -> Cart:
        payload = await self._api.get(f"/cart/{user_id}")
        return Cart.model_validate(payload or {})

    def contains(self, product_id: Union[int, str]) -> bool:
        return self._value is not None and self._value.find_by_product(product_id) is not None

    async def add_to_cart(self, product_id: Union[int, str], quantity: int = 1) -> ActionResult:
        async def add(user_id: Any) -> Any:
            request = AddCartItemRequest(product_id=product_id, quantity=quantity)
            return await self._api.post(
                f"/cart/{user_id}/items", request.model_dump(by_alias=True)
            )

        return await self._mutate(add, "Failed to add to cart")

    async def remove_from_cart(self, item_id: Union[int, str]) -> ActionResult:
        async def remove(user_id: Any) -> Any:
            return await self._api.delete(f"/cart/{user_id}/items/{item_id}")

        return await self._mutate(remove, "Failed to remove from cart")

    async def fetch_filtered(self, **filters: Any) -> Cart:
        user = self._session.user
        if user is None:
            raise NotAuthenticatedError(self.login_required_message)
        payload = await self._api.get(f"/cart/{user.id}/filtered", query=filters or None)
        return Cart.model_validate(payload or {})
