"""
Cart module data models.
"""

import logging
from typing import Any, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ecobazaar.modules.catalog.models import Product

logger = logging.getLogger(__name__)


class CartItem(BaseModel):
    """One line of the cart."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    item_id: Union[int, str] = Field(
        ..., validation_alias=AliasChoices("itemId", "id", "item_id"), description="Cart line ID"
    )
    product_id: Union[int, str] = Field(
        ..., validation_alias=AliasChoices("productId", "product_id"), description="Product ID"
    )
    quantity: int = Field(default=1, ge=0)
    product: Optional[Product] = None

    @model_validator(mode="before")
    @classmethod
    def _product_id_from_product(cls, data: Any) -> Any:
        if isinstance(data, dict) and not any(k in data for k in ("productId", "product_id")):
            product = data.get("product")
            if isinstance(product, dict) and product.get("id") is not None:
                data = {**data, "productId": product["id"]}
        return data

    @field_validator("product", mode="wrap")
    @classmethod
    def _tolerate_bad_product(cls, value: Any, handler: Any) -> Optional[Product]:
        # Invalid product details are dropped; the line itself is kept.
        try:
            return handler(value)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid product details on cart item: {e.error_count()} errors")
            return None


class Cart(BaseModel):
    """Snapshot of the server-side cart."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: Optional[Union[int, str]] = None
    items: list[CartItem] = Field(default_factory=list)
    total_price: Optional[float] = Field(
        None, validation_alias=AliasChoices("totalPrice", "total_price")
    )

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def find_by_product(self, product_id: Union[int, str]) -> Optional[CartItem]:
        for item in self.items:
            if str(item.product_id) == str(product_id):
                return item
        return None


class AddCartItemRequest(BaseModel):
    """Body of POST /cart/{userId}/items."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: Union[int, str] = Field(..., serialization_alias="productId")
    quantity: int = Field(default=1, ge=1)


class CartState(BaseModel):
    """Snapshot of the cart cache for consumers."""

    model_config = ConfigDict(frozen=True)

    cart: Optional[Cart] = None
    loading: bool = False
    error: Optional[str] = None
