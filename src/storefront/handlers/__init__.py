"""
AWS Lambda Handlers Module.

Entry points of the storefront API. Each handler module owns one API
Gateway REST resolver and a ``lambda_handler``:

- auth_handler: POST /auth/register, POST /auth/login
- products_handler: /products and /products/{id}
- orders_handler: /orders and /orders/{id}

Handlers parse and validate the request, authorize the caller where the
route is protected, delegate to the logic layer and wrap the result with
the response builder.
"""

from storefront.handlers.utils.observability import logger, metrics, tracer

__all__ = ["logger", "metrics", "tracer"]
