"""
Wishlist module exceptions.
"""

from typing import Any, Union

from ecobazaar.shared.exceptions import EcobazaarError, NotFoundError


class WishlistError(EcobazaarError):
    """Base exception for wishlist-related errors."""

    pass


class ContractMismatchError(WishlistError):
    """Raised when every candidate request shape for an operation failed."""

    def __init__(self, operation: str, attempts: list[Any]):
        super().__init__(
            "All endpoint patterns failed - check backend API",
            code="CONTRACT_MISMATCH",
            details={
                "operation": operation,
                "attempts": [
                    {
                        "candidate": a.candidate,
                        "request": a.request.describe(),
                        "status": a.http_status,
                        "error": a.error,
                    }
                    for a in attempts
                ],
            },
        )
        self.operation = operation
        self.attempts = attempts


class InvalidWishlistEntryError(WishlistError):
    """Raised when a backend wishlist record has no usable product reference."""

    def __init__(self, raw: Any, reason: str):
        super().__init__(
            f"Invalid wishlist entry: {reason}",
            code="INVALID_WISHLIST_ENTRY",
            details={"raw": raw, "reason": reason},
        )


class WishlistEntryNotFoundError(NotFoundError):
    """Raised when an entry ID is not in the cached wishlist."""

    def __init__(self, entry_id: Union[int, str]):
        super().__init__({"error": "Wishlist item not found"})
        self.code = "WISHLIST_ENTRY_NOT_FOUND"
        self.details["entry_id"] = entry_id


class RemovalNotConfirmedError(WishlistError):
    """Raised when a removal call succeeded but the product is still listed."""

    def __init__(self, product_id: Union[int, str]):
        super().__init__(
            "Wishlist item was not removed",
            code="REMOVAL_NOT_CONFIRMED",
            details={"product_id": product_id},
        )
