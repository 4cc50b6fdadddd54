"""
Catalog module data models.
"""

from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """
    A marketplace product.

    The backend sends camelCase keys; unknown fields are kept.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: Union[int, str] = Field(..., description="Product ID")
    name: Optional[str] = Field(None, description="Display name")
    price: Optional[float] = Field(None, description="Unit price")
    category: Optional[Any] = Field(None, description="Category name or object")
    carbon_footprint: Optional[float] = Field(
        None, alias="carbonFootprint", description="kg CO2e per unit"
    )
    eco_rating: Optional[str] = Field(None, alias="ecoRating", description="Eco rating grade")
    stock: Optional[int] = Field(None, description="Units in stock")
