"""
Order domain model for the business logic layer.

Orders are immutable once created: there is no update path, only reads
scoped to the owning user.
"""

from enum import Enum
from typing import Annotated, List, Literal
from uuid import uuid4

from pydantic import Field

from storefront.models.base import CamelModel, utc_now
from storefront.models.input import CreateOrderRequest

ORDER_TYPE = 'order'


class OrderStatus(str, Enum):
    """Order status enumeration."""

    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'


class OrderItem(CamelModel):
    product_id: str
    quantity: Annotated[int, Field(ge=1)]
    price: Annotated[float, Field(gt=0, allow_inf_nan=False)]

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class ShippingAddress(CamelModel):
    street: str
    city: str
    state: str
    zip_code: str
    country: str


def calculate_total(items: List[OrderItem]) -> float:
    """Sum of unit price times quantity over all lines."""
    return sum(item.line_total for item in items)


class Order(CamelModel):
    """Core Order domain model."""

    id: Annotated[str, Field(description='Unique identifier for the order')]
    type: Literal['order'] = ORDER_TYPE
    user_id: Annotated[str, Field(description='Owner of the order')]
    user_email: str
    items: Annotated[List[OrderItem], Field(min_length=1)]
    shipping_address: ShippingAddress
    total_amount: Annotated[float, Field(ge=0, allow_inf_nan=False)]
    status: OrderStatus = OrderStatus.PENDING
    created_at: str
    updated_at: str

    @classmethod
    def create(cls, request: CreateOrderRequest, user_id: str, user_email: str) -> 'Order':
        """
        Create a new pending order owned by ``user_id``.

        The total is always computed server-side from the submitted lines.
        """
        items = [OrderItem(**item.model_dump()) for item in request.items]
        now = utc_now()
        return cls(
            id=str(uuid4()),
            user_id=user_id,
            user_email=user_email,
            items=items,
            shipping_address=ShippingAddress(**request.shipping_address.model_dump()),
            total_amount=calculate_total(items),
            status=OrderStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
