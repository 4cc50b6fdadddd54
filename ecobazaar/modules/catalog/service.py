"""
Product catalog service.
"""

from typing import Any, Union

from ecobazaar.shared.http import ApiClient

from .interfaces import IProductService
from .models import Product


def _product_list(payload: Any) -> list[Product]:
    # Paged responses wrap the list in "content" or "products".
    if isinstance(payload, dict):
        payload = payload.get("content") or payload.get("products") or []
    return [Product.model_validate(item) for item in payload or []]


class ProductService(IProductService):
    """Catalog reads through the shared ApiClient."""

    def __init__(self, api: ApiClient):
        self._api = api

    async def search(self, **params: Any) -> list[Product]:
        payload = await self._api.get("/products", query=params or None)
        return _product_list(payload)

    async def get_by_id(self, product_id: Union[int, str]) -> Product:
        payload = await self._api.get(f"/products/{product_id}")
        return Product.model_validate(payload)

    async def get_featured(self) -> list[Product]:
        payload = await self._api.get("/products/featured")
        return _product_list(payload)
