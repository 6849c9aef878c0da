"""
Storefront Service Module.

Serverless storefront backend: user registration and login, a product
catalog and per-user orders, all stored in a single DynamoDB table. The
package follows a three-layer architecture:

- handlers: API Gateway entry points, request parsing and responses
- logic: Business rules such as ownership checks and order totals
- dal: Single-table entity store on DynamoDB
- models: Pydantic request, response and domain models
- security: Tokens, password hashing, security headers and log redaction
"""

__version__ = "1.0.0"

from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.models import Order, OrderStatus, Product, User

__all__ = [
    "Order",
    "OrderStatus",
    "Product",
    "User",
    "logger",
    "tracer",
    "metrics",
]
