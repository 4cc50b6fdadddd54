"""
Cart module interface.
"""

from typing import Any, Optional, Protocol, Union, runtime_checkable

from ecobazaar.shared.models import ActionResult

from .models import Cart, CartState


@runtime_checkable
class ICartCache(Protocol):
    """
    Per-user cart cache.

    Mutations go to the server and are followed by a full reload; the cache
    itself is never edited in place.
    """

    @property
    def cart(self) -> Optional[Cart]:
        ...

    @property
    def state(self) -> CartState:
        ...

    async def load(self) -> None:
        """Replace the cache with the server's cart. No-op without a user."""
        ...

    async def add_to_cart(self, product_id: Union[int, str], quantity: int = 1) -> ActionResult:
        """Add a product, then reload. Fails fast when logged out."""
        ...

    async def remove_from_cart(self, item_id: Union[int, str]) -> ActionResult:
        """Remove a cart line, then reload. Fails fast when logged out."""
        ...

    def contains(self, product_id: Union[int, str]) -> bool:
        """Synchronous membership check against the cached cart."""
        ...

    def clear(self) -> None:
        """Drop the cached cart (does not touch the server)."""
        ...

    async def fetch_filtered(self, **filters: Any) -> Cart:
        """Server-side filtered view of the cart. Not cached."""
        ...
