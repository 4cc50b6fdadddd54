"""
Catalog module.

Read-only access to marketplace products.

Public API:
- IProductService: Interface for catalog reads
- ProductService: Implementation over the shared ApiClient
- Product: Product model
"""

from .interfaces import IProductService
from .models import Product
from .service import ProductService

__all__ = [
    "IProductService",
    "Product",
    "ProductService",
]
