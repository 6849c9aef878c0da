"""
Storefront Models Package

This package contains all Pydantic models used throughout the service,
including input validation models, output response models, and domain models.
"""

from .input import (
    CreateOrderRequest,
    CreateProductRequest,
    LoginRequest,
    OrderItemRequest,
    RegisterRequest,
    ShippingAddressRequest,
    UpdateProductRequest,
)
from .order import Order, OrderItem, OrderStatus, ShippingAddress
from .output import AuthOutput, DeleteOutput
from .product import Product
from .user import User, UserView

__all__ = [
    # Input models
    "RegisterRequest",
    "LoginRequest",
    "CreateProductRequest",
    "UpdateProductRequest",
    "OrderItemRequest",
    "ShippingAddressRequest",
    "CreateOrderRequest",

    # Output models
    "AuthOutput",
    "DeleteOutput",

    # Domain models
    "User",
    "UserView",
    "Product",
    "Order",
    "OrderItem",
    "OrderStatus",
    "ShippingAddress",
]
