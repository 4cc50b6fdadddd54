"""
Wishlist module.

Public API:
- IWishlistCache: Interface for the wishlist cache
- WishlistCache: Implementation
- BareEntry, ProductEntry, WishlistState: Models
- parse_entry, product_id_of, entry_matches: Entry helpers
- EndpointResolver and friends: Ordered endpoint probing
- Wishlist exceptions
"""

from .interfaces import IWishlistCache
from .models import (
    BareEntry,
    ProductEntry,
    WishlistEntry,
    WishlistState,
    AddWishlistRequest,
    parse_entry,
    product_id_of,
    entry_matches,
)
from .endpoints import (
    RequestShape,
    EndpointCandidate,
    CandidateStatus,
    CandidateAttempt,
    Resolution,
    EndpointResolver,
    WISHLIST_REMOVAL_CANDIDATES,
    wishlist_removal_resolver,
)
from .exceptions import (
    WishlistError,
    ContractMismatchError,
    InvalidWishlistEntryError,
    WishlistEntryNotFoundError,
    RemovalNotConfirmedError,
)
from .service import WishlistCache

__all__ = [
    # Interface
    "IWishlistCache",
    # Models
    "BareEntry",
    "ProductEntry",
    "WishlistEntry",
    "WishlistState",
    "AddWishlistRequest",
    "parse_entry",
    "product_id_of",
    "entry_matches",
    # Endpoint resolution
    "RequestShape",
    "EndpointCandidate",
    "CandidateStatus",
    "CandidateAttempt",
    "Resolution",
    "EndpointResolver",
    "WISHLIST_REMOVAL_CANDIDATES",
    "wishlist_removal_resolver",
    # Exceptions
    "WishlistError",
    "ContractMismatchError",
    "InvalidWishlistEntryError",
    "WishlistEntryNotFoundError",
    "RemovalNotConfirmedError",
    # Service
    "WishlistCache",
]
