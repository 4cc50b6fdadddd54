"""
Cart module.

Public API:
- ICartCache: Interface for the cart cache
- CartCache: Implementation
- Cart, CartItem, CartState, AddCartItemRequest: Models
"""

from .interfaces import ICartCache
from .models import Cart, CartItem, CartState, AddCartItemRequest
from .service import CartCache

__all__ = [
    "ICartCache",
    "Cart",
    "CartItem",
    "CartState",
    "AddCartItemRequest",
    "CartCache",
]
