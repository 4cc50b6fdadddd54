"""
Wishlist module data models.

The backend is not consistent about entry shape: some entries carry a
nested product, some only a productId. Entries are parsed into one of two
explicit variants, and all lookups go through `product_id_of` /
`entry_matches` instead of inspecting raw dicts.
"""

from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ecobazaar.modules.catalog.models import Product

from .exceptions import InvalidWishlistEntryError


class BareEntry(BaseModel):
    """Entry the backend sent with a productId only."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bare"] = "bare"
    entry_id: Optional[Union[int, str]] = None
    product_id: Union[int, str]


class ProductEntry(BaseModel):
    """Entry with the product embedded."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["with_product"] = "with_product"
    entry_id: Optional[Union[int, str]] = None
    product_id: Union[int, str]
    product: Product


WishlistEntry = Annotated[Union[BareEntry, ProductEntry], Field(discriminator="kind")]


def parse_entry(raw: Any) -> Union[BareEntry, ProductEntry]:
    """
    Build a wishlist entry from a backend record.

    Raises:
        InvalidWishlistEntryError: Neither productId nor product.id present,
            or the ids are not usable
    """
    if not isinstance(raw, dict):
        raise InvalidWishlistEntryError(raw, "entry is not an object")
    entry_id = raw.get("id", raw.get("entryId"))
    product_raw = raw.get("product")
    product = None
    product_id = raw.get("productId")
    if isinstance(product_raw, dict) and product_raw.get("id") is not None:
        try:
            product = Product.model_validate(product_raw)
        except ValidationError:
            # Keep the reference, drop the unusable details.
            product = None
        if product_id is None:
            product_id = product_raw["id"]
    if product_id is None:
        raise InvalidWishlistEntryError(raw, "no productId or product.id")

    try:
        if product is not None:
            return ProductEntry(entry_id=entry_id, product_id=product_id, product=product)
        return BareEntry(entry_id=entry_id, product_id=product_id)
    except ValidationError as e:
        raise InvalidWishlistEntryError(raw, f"unusable ids ({e.error_count()} errors)")


def product_id_of(entry: Union[BareEntry, ProductEntry]) -> Union[int, str]:
    """The product an entry refers to: productId, falling back to product.id."""
    if entry.product_id is not None:
        return entry.product_id
    return entry.product.id  # type: ignore[union-attr]


def entry_matches(entry: Union[BareEntry, ProductEntry], product_id: Union[int, str]) -> bool:
    """True if the entry refers to `product_id` by either reference."""
    wanted = str(product_id)
    if isinstance(entry, ProductEntry) and str(entry.product.id) == wanted:
        return True
    return str(product_id_of(entry)) == wanted


class AddWishlistRequest(BaseModel):
    """Body of POST /wishlist/{userId}."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: Union[int, str] = Field(..., serialization_alias="productId")


class WishlistState(BaseModel):
    """Snapshot of the wishlist cache for consumers."""

    model_config = ConfigDict(frozen=True)

    wishlist: list[WishlistEntry] = Field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None
