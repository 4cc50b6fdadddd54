"""
Catalog module interface.

The wishlist depends on IProductService to fill in product details for
entries the backend returns without them.
"""

from typing import Any, Protocol, Union, runtime_checkable

from .models import Product


@runtime_checkable
class IProductService(Protocol):
    """Read access to the product catalog."""

    async def search(self, **params: Any) -> list[Product]:
        """
        Search products.

        Args:
            params: Query parameters passed through to GET /products
                    (e.g. keyword, category, page)

        Returns:
            Matching products
        """
        ...

    async def get_by_id(self, product_id: Union[int, str]) -> Product:
        """
        Fetch a single product.

        Raises:
            NotFoundError: No such product
        """
        ...

    async def get_featured(self) -> list[Product]:
        """Products flagged as featured."""
        ...
