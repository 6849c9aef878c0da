"""
REST API resolver utilities shared by the storefront Lambda handlers.

Each handler module owns one ``APIGatewayRestResolver``; the helpers here
parse request bodies, read the request origin and convert errors raised by
routes into enveloped HTTP responses.
"""

import functools
import json
from typing import Any, Callable, Optional, Type, TypeVar

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, Response
from aws_lambda_powertools.event_handler.exceptions import NotFoundError
from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from storefront.handlers.utils.errors import (
    BaseServiceError,
    ValidationError,
    get_http_status_code,
    log_error_metrics,
)
from storefront.handlers.utils.observability import logger, metrics
from storefront.handlers.utils.response import INTERNAL_ERROR_MESSAGE, build_response
from storefront.handlers.utils.service_factory import get_security_config

M = TypeVar('M', bound=BaseModel)

# API path constants
AUTH_PATH = '/auth'
PRODUCTS_PATH = '/products'
ORDERS_PATH = '/orders'


def request_origin(resolver: APIGatewayRestResolver) -> Optional[str]:
    """The Origin header of the current request, if any."""
    return resolver.current_event.headers.get('Origin')


def respond(resolver: APIGatewayRestResolver, status_code: int, payload: Any, **kwargs: Any) -> Response:
    """Enveloped response with CORS resolved against the current request."""
    return build_response(
        status_code,
        payload,
        origin=request_origin(resolver),
        security=get_security_config(),
        **kwargs,
    )


def parse_body(resolver: APIGatewayRestResolver, model: Type[M]) -> M:
    """
    Decode the JSON body of the current request into a request model.

    Raises:
        ValidationError: If the body is not valid JSON
        pydantic.ValidationError: If the body does not match the model
    """
    try:
        request_body = json.loads(resolver.current_event.body or '{}')
    except json.JSONDecodeError:
        raise ValidationError("Invalid JSON in request body") from None
    return model.model_validate(request_body)


def describe_validation_error(error: PydanticValidationError) -> str:
    """First validation failure as ``field: message``."""
    first = error.errors()[0]
    location = '.'.join(str(part) for part in first['loc'])
    message = first['msg'].removeprefix('Value error, ')
    return f"{location}: {message}" if location else message


def handle_service_errors(resolver: APIGatewayRestResolver) -> Callable:
    """Decorator factory converting errors raised by a route into HTTP responses."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except BaseServiceError as e:
                log_error_metrics(e)
                status_code = get_http_status_code(e)
                message = INTERNAL_ERROR_MESSAGE if status_code >= 500 else e.user_message
                extra_headers = {"Retry-After": str(e.retry_after)} if e.retry_after else None
                return respond(resolver, status_code, message, extra_headers=extra_headers)

            except PydanticValidationError as e:
                message = describe_validation_error(e)
                logger.warning("Request validation failed", extra={
                    "validation_error": message,
                    "error_count": e.error_count(),
                })
                metrics.add_metric(name="ValidationError", unit=MetricUnit.Count, value=1)
                return respond(resolver, 400, message)

            except Exception as e:
                logger.exception("Unexpected error in handler", extra={
                    "error": str(e),
                    "function_name": func.__name__,
                })
                metrics.add_metric(name="UnexpectedError", unit=MetricUnit.Count, value=1)
                return respond(resolver, 500, INTERNAL_ERROR_MESSAGE)

        return wrapper
    return decorator


def create_rest_resolver() -> APIGatewayRestResolver:
    """API Gateway REST resolver whose unknown routes answer with the standard envelope."""
    app = APIGatewayRestResolver()

    @app.not_found
    def route_not_found(exc: NotFoundError) -> Response:
        logger.info("Route not found", extra={"path": app.current_event.path})
        return respond(app, 404, 'Not found')

    return app
