"""
Business Logic Layer for Order Management.

Orders are created by and visible only to their owner. Totals are computed
server-side; optionally every line price is checked against the catalog.
"""

import math
from typing import List

from aws_lambda_powertools.metrics import MetricUnit

from storefront.dal import EntityStore
from storefront.handlers.utils.errors import AuthorizationError, ResourceNotFoundError, ValidationError
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.models.input import CreateOrderRequest
from storefront.models.order import ORDER_TYPE, Order
from storefront.models.product import PRODUCT_TYPE
from storefront.security.auth import TokenClaims


class OrderNotFoundError(ResourceNotFoundError):
    """Raised when an order is not found."""

    def __init__(self, order_id: str):
        super().__init__(resource_type="Order", resource_id=order_id)


class OrderService:
    """Business logic service for order management."""

    def __init__(self, entity_store: EntityStore, enforce_catalog_prices: bool = False) -> None:
        """
        Args:
            entity_store: Single-table store holding orders and products
            enforce_catalog_prices: Reject orders whose line prices differ
                from the stored product price
        """
        self.entity_store = entity_store
        self.enforce_catalog_prices = enforce_catalog_prices

    @tracer.capture_method
    def create_order(self, request: CreateOrderRequest, caller: TokenClaims) -> Order:
        """
        Place a pending order owned by the caller.

        Raises:
            ValidationError: If the lines add up to a total that is not a
                finite number, or catalog prices are enforced and a line
                refers to an unknown product or carries a different price
        """
        if not math.isfinite(sum(item.price * item.quantity for item in request.items)):
            raise ValidationError("totalAmount: Order total is out of range")

        if self.enforce_catalog_prices:
            self._check_catalog_prices(request)

        order = Order.create(request, user_id=caller.user_id, user_email=caller.email)
        self.entity_store.put(order.to_dict())

        metrics.add_metric(name="OrderCreated", unit=MetricUnit.Count, value=1)
        metrics.add_metric(name="OrderItems", unit=MetricUnit.Count, value=len(order.items))
        logger.info("Order created", extra={
            "order_id": order.id,
            "user_id": caller.user_id,
            "total_amount": order.total_amount,
        })
        return order

    @tracer.capture_method
    def list_orders(self, caller: TokenClaims) -> List[Order]:
        items = self.entity_store.scan(ORDER_TYPE, userId=caller.user_id)
        return [Order.model_validate(item) for item in items]

    @tracer.capture_method
    def get_order(self, order_id: str, caller: TokenClaims) -> Order:
        """
        Raises:
            OrderNotFoundError: If no order has this id
            AuthorizationError: If the order belongs to someone else
        """
        item = self.entity_store.get(order_id, ORDER_TYPE)
        if item is None:
            raise OrderNotFoundError(order_id)

        order = Order.model_validate(item)
        if not order.is_owned_by(caller.user_id):
            metrics.add_metric(name="OrderAccessDenied", unit=MetricUnit.Count, value=1)
            logger.warning("Order requested by non-owner", extra={
                "order_id": order_id,
                "user_id": caller.user_id,
            })
            raise AuthorizationError("Access denied")
        return order

    def _check_catalog_prices(self, request: CreateOrderRequest) -> None:
        for item in request.items:
            product = self.entity_store.get(item.product_id, PRODUCT_TYPE)
            if product is None:
                raise ValidationError(f"Product {item.product_id} does not exist")
            if not math.isclose(float(product['price']), item.price, rel_tol=1e-9):
                raise ValidationError(f"Price for product {item.product_id} does not match the catalog")
