"""
Auth Handler - Lambda function for user registration and login.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.handlers.utils.response import INTERNAL_ERROR_MESSAGE, create_api_response
from storefront.handlers.utils.rest_api_resolver import (
    AUTH_PATH,
    create_rest_resolver,
    handle_service_errors,
    parse_body,
    respond,
)
from storefront.handlers.utils.service_factory import get_auth_service
from storefront.models.input import LoginRequest, RegisterRequest

app = create_rest_resolver()


@app.post(f"{AUTH_PATH}/register")
@tracer.capture_method
@handle_service_errors(app)
def register() -> Response:
    logger.info("Register request received")
    register_request = parse_body(app, RegisterRequest)

    output = get_auth_service().register(register_request)
    return respond(app, 201, output.to_dict())


@app.post(f"{AUTH_PATH}/login")
@tracer.capture_method
@handle_service_errors(app)
def login() -> Response:
    logger.info("Login request received")
    login_request = parse_body(app, LoginRequest)

    output = get_auth_service().login(login_request)
    return respond(app, 200, output.to_dict())


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST, clear_state=True)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function for the auth API.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway response
    """
    try:
        metrics.add_metric(name="RequestCount", unit=MetricUnit.Count, value=1)
        tracer.put_annotation("service", "auth-api")
        return app.resolve(event, context)

    except Exception as e:
        metrics.add_metric(name="RequestError", unit=MetricUnit.Count, value=1)
        logger.exception("Unhandled error in lambda handler", extra={"error": str(e)})
        return create_api_response(status_code=500, payload=INTERNAL_ERROR_MESSAGE)
