"""
==============================================================================
Product Models Module
==============================================================================

Pydantic models for catalog records and query results.

==============================================================================
"""

from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field, ConfigDict


class Product(BaseModel):
    """
    Product record held by the in-memory store.

    Attributes:
        id: Opaque identifier, generated on create and never changed
        name: Product display name
        description: Free text description
        price: Non-negative price
        category: Free-form category, matched case-insensitively
        in_stock: Stock status, serialized as ``inStock``
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
    )

    id: str = Field(..., min_length=1, description="Product identifier")
    name: str = Field(..., description="Product name")
    description: str = Field(..., description="Product description")
    price: Union[int, float] = Field(..., ge=0, description="Price")
    category: str = Field(..., description="Category")
    in_stock: bool = Field(default=True, alias="inStock", description="Stock status")

    def to_response(self) -> Dict[str, Any]:
        """Serialize with the public camelCase field names."""
        return self.model_dump(by_alias=True)


class Pagination(BaseModel):
    """
    Pagination descriptor computed per query.

    ``next`` and ``prev`` are only set when such a page exists and are
    left out of the serialized form otherwise.
    """

    current: int
    pages: int
    total: int
    limit: int
    next: Optional[int] = None
    prev: Optional[int] = None

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ProductPage(BaseModel):
    """One page of a filtered listing."""

    products: List[Product]
    pagination: Pagination

    @property
    def count(self) -> int:
        return len(self.products)
