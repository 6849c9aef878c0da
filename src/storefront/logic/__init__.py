"""
Business Logic Layer Module.

This module contains the core business logic of the storefront service. It
implements the middle layer of the three-layer architecture: handlers parse
and validate requests, the logic layer enforces ownership and business rules,
and the data access layer talks to DynamoDB.
"""

from storefront.logic.auth_service import AuthConfig, AuthService
from storefront.logic.order_service import OrderNotFoundError, OrderService
from storefront.logic.product_service import ProductNotFoundError, ProductService

__all__ = [
    "AuthConfig",
    "AuthService",
    "OrderNotFoundError",
    "OrderService",
    "ProductNotFoundError",
    "ProductService",
]
