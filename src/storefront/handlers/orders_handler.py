"""
Orders Handler - Lambda function for order management API.

Every route requires a bearer token; callers only ever see their own orders.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.handlers.utils.response import INTERNAL_ERROR_MESSAGE, create_api_response
from storefront.handlers.utils.rest_api_resolver import (
    ORDERS_PATH,
    create_rest_resolver,
    handle_service_errors,
    parse_body,
    respond,
)
from storefront.handlers.utils.service_factory import get_auth_service, get_order_service
from storefront.models.input import CreateOrderRequest
from storefront.security.auth import TokenClaims

app = create_rest_resolver()


def _authorize() -> TokenClaims:
    claims = get_auth_service().authorize(app.current_event.headers)
    logger.append_keys(user_id=claims.user_id)
    return claims


@app.post(ORDERS_PATH)
@tracer.capture_method
@handle_service_errors(app)
def create_order() -> Response:
    """
    Place an order for the caller.

    Returns:
        201 with the stored order, including the computed total
    """
    caller = _authorize()
    create_request = parse_body(app, CreateOrderRequest)
    tracer.put_annotation("order_item_count", len(create_request.items))

    order = get_order_service().create_order(create_request, caller)
    return respond(app, 201, order.to_dict(), extra_headers={"Location": f"{ORDERS_PATH}/{order.id}"})


@app.get(ORDERS_PATH)
@tracer.capture_method
@handle_service_errors(app)
def list_orders() -> Response:
    caller = _authorize()

    orders = get_order_service().list_orders(caller)

    logger.info("Orders listed successfully", extra={"orders_count": len(orders)})
    return respond(app, 200, [order.to_dict() for order in orders])


@app.get(f"{ORDERS_PATH}/<order_id>")
@tracer.capture_method
@handle_service_errors(app)
def get_order(order_id: str) -> Response:
    caller = _authorize()
    tracer.put_annotation("order_id", order_id)

    order = get_order_service().get_order(order_id, caller)
    return respond(app, 200, order.to_dict())


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST, clear_state=True)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function for the orders API.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway response
    """
    try:
        metrics.add_metric(name="RequestCount", unit=MetricUnit.Count, value=1)
        tracer.put_annotation("service", "orders-api")
        return app.resolve(event, context)

    except Exception as e:
        metrics.add_metric(name="RequestError", unit=MetricUnit.Count, value=1)
        logger.exception("Unhandled error in lambda handler", extra={"error": str(e)})
        return create_api_response(status_code=500, payload=INTERNAL_ERROR_MESSAGE)
