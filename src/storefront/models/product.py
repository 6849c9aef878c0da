"""
Product domain model.
"""

from typing import Annotated, Literal, Optional
from uuid import uuid4

from pydantic import Field

from storefront.models.base import CamelModel, utc_now
from storefront.models.input import CreateProductRequest

PRODUCT_TYPE = 'product'


class Product(CamelModel):
    """Catalog product stored under a generated id with the ``product`` type."""

    id: Annotated[str, Field(description='Unique identifier for the product')]
    type: Literal['product'] = PRODUCT_TYPE
    name: str
    description: Optional[str] = None
    price: Annotated[float, Field(gt=0)]
    category: str
    stock: Annotated[int, Field(ge=0)]
    image_url: Optional[str] = None
    created_at: str
    updated_at: str

    @classmethod
    def create(cls, request: CreateProductRequest) -> 'Product':
        """
        Create a new product with generated ID and timestamps.

        Args:
            request: Validated creation request

        Returns:
            New Product instance; createdAt and updatedAt are equal
        """
        now = utc_now()
        return cls(
            id=str(uuid4()),
            name=request.name,
            description=request.description,
            price=request.price,
            category=request.category,
            stock=request.stock,
            image_url=request.image_url,
            created_at=now,
            updated_at=now,
        )
