"""
EcoBazaar storefront client.

Session lifecycle, per-user cart and wishlist caches, and a resilient HTTP
access layer for the EcoBazaar sustainable marketplace API.
"""

from .client import StorefrontClient
from .shared.config import Settings, get_settings
from .shared.models import ActionResult

__version__ = "0.1.0"

__all__ = [
    "StorefrontClient",
    "Settings",
    "get_settings",
    "ActionResult",
]
