"""
Wishlist module interface.
"""

from typing import Optional, Protocol, Union, runtime_checkable

from ecobazaar.modules.catalog.models import Product
from ecobazaar.shared.models import ActionResult

from .endpoints import CandidateAttempt
from .models import BareEntry, ProductEntry, WishlistState


@runtime_checkable
class IWishlistCache(Protocol):
    """
    Per-user wishlist cache.

    Every mutation is followed by a full reload. Removal goes through the
    endpoint resolver because the backend route is not fixed.
    """

    @property
    def wishlist(self) -> list[Union[BareEntry, ProductEntry]]:
        ...

    @property
    def state(self) -> WishlistState:
        ...

    @property
    def debug_trace(self) -> list[CandidateAttempt]:
        """Recent endpoint attempts, oldest first. Diagnostic only."""
        ...

    async def load(self) -> None:
        ...

    def contains(self, product_id: Union[int, str]) -> bool:
        """Synchronous membership check. Accepts either entry shape."""
        ...

    async def add(self, product_id: Union[int, str]) -> ActionResult:
        ...

    async def remove(self, product_id: Union[int, str]) -> ActionResult:
        ...

    async def toggle(self, product_id: Union[int, str]) -> ActionResult:
        """Remove if present, add otherwise, then reload."""
        ...

    async def remove_entry(self, entry_id: Union[int, str]) -> ActionResult:
        """Remove by wishlist entry ID (resolved against the current cache)."""
        ...

    def get_entry_product(self, entry_id: Union[int, str]) -> Optional[Product]:
        ...

    def clear_error(self) -> None:
        ...
