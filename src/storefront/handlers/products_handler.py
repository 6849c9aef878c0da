"""
Products Handler - Lambda function for the product catalog API.

Reads are public; creating, updating and deleting a product requires a valid
bearer token.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.handlers.utils.response import INTERNAL_ERROR_MESSAGE, create_api_response
from storefront.handlers.utils.rest_api_resolver import (
    PRODUCTS_PATH,
    create_rest_resolver,
    handle_service_errors,
    parse_body,
    respond,
)
from storefront.handlers.utils.service_factory import get_auth_service, get_product_service
from storefront.models.input import CreateProductRequest, UpdateProductRequest
from storefront.models.output import DeleteOutput

app = create_rest_resolver()


def _authorize() -> None:
    claims = get_auth_service().authorize(app.current_event.headers)
    logger.append_keys(user_id=claims.user_id)


@app.post(PRODUCTS_PATH)
@tracer.capture_method
@handle_service_errors(app)
def create_product() -> Response:
    """Create a product."""
    _authorize()
    create_request = parse_body(app, CreateProductRequest)

    product = get_product_service().create_product(create_request)
    return respond(app, 201, product.to_dict())


@app.get(PRODUCTS_PATH)
@tracer.capture_method
@handle_service_errors(app)
def list_products() -> Response:
    """List every product in the catalog."""
    products = get_product_service().list_products()

    logger.info("Products listed", extra={"products_count": len(products)})
    return respond(app, 200, [product.to_dict() for product in products])


@app.get(f"{PRODUCTS_PATH}/<product_id>")
@tracer.capture_method
@handle_service_errors(app)
def get_product(product_id: str) -> Response:
    tracer.put_annotation("product_id", product_id)

    product = get_product_service().get_product(product_id)
    return respond(app, 200, product.to_dict())


@app.put(f"{PRODUCTS_PATH}/<product_id>")
@tracer.capture_method
@handle_service_errors(app)
def update_product(product_id: str) -> Response:
    """Apply a partial update to a product."""
    _authorize()
    tracer.put_annotation("product_id", product_id)
    update_request = parse_body(app, UpdateProductRequest)

    product = get_product_service().update_product(product_id, update_request)
    return respond(app, 200, product.to_dict())


@app.delete(f"{PRODUCTS_PATH}/<product_id>")
@tracer.capture_method
@handle_service_errors(app)
def delete_product(product_id: str) -> Response:
    _authorize()
    tracer.put_annotation("product_id", product_id)

    get_product_service().delete_product(product_id)
    return respond(app, 200, DeleteOutput().to_dict())


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST, clear_state=True)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function for the products API.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway response
    """
    try:
        metrics.add_metric(name="RequestCount", unit=MetricUnit.Count, value=1)
        tracer.put_annotation("service", "products-api")
        return app.resolve(event, context)

    except Exception as e:
        metrics.add_metric(name="RequestError", unit=MetricUnit.Count, value=1)
        logger.exception("Unhandled error in lambda handler", extra={"error": str(e)})
        return create_api_response(status_code=500, payload=INTERNAL_ERROR_MESSAGE)
