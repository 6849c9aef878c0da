"""
Response builder for the storefront API.

Every response uses the same JSON envelope, ``{"success": true, "data": ...}``
or ``{"success": false, "error": "<message>"}``, and carries the full
security and CORS header set from ``SecurityConfig``.
"""

import json
from typing import Any, Dict, Optional

from aws_lambda_powertools.event_handler import Response, content_types

from storefront.security.security_headers import DEFAULT_SECURITY_CONFIG, SecurityConfig

INTERNAL_ERROR_MESSAGE = 'Internal server error'


def build_envelope(status_code: int, payload: Any) -> Dict[str, Any]:
    """Wrap a payload: data for 2xx statuses, an error message otherwise."""
    if 200 <= status_code < 300:
        return {'success': True, 'data': payload}
    return {'success': False, 'error': payload}


def build_headers(
    origin: Optional[str] = None,
    security: SecurityConfig = DEFAULT_SECURITY_CONFIG,
    extra_headers: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    headers = {'Content-Type': content_types.APPLICATION_JSON}
    headers.update(security.headers_for(origin))
    if extra_headers:
        headers.update(extra_headers)
    return headers


def build_response(
    status_code: int,
    payload: Any,
    origin: Optional[str] = None,
    security: SecurityConfig = DEFAULT_SECURITY_CONFIG,
    extra_headers: Optional[Dict[str, str]] = None,
) -> Response:
    """
    Build a resolver response with the standard envelope and headers.

    Args:
        status_code: HTTP status code
        payload: Data for success statuses, error message otherwise
        origin: Origin header of the request, used for CORS
        security: Security header configuration
        extra_headers: Additional headers, e.g. ``Retry-After``

    Returns:
        Powertools response object
    """
    return Response(
        status_code=status_code,
        content_type=content_types.APPLICATION_JSON,
        body=json.dumps(build_envelope(status_code, payload)),
        headers=build_headers(origin, security, extra_headers),
    )


def create_api_response(
    status_code: int,
    payload: Any,
    origin: Optional[str] = None,
    security: SecurityConfig = DEFAULT_SECURITY_CONFIG,
) -> Dict[str, Any]:
    """Raw API Gateway proxy result, for use outside the resolver."""
    return {
        'statusCode': status_code,
        'headers': build_headers(origin, security),
        'body': json.dumps(build_envelope(status_code, payload)),
    }


def ok(data: Any, **kwargs: Any) -> Response:
    return build_response(200, data, **kwargs)


def created(data: Any, **kwargs: Any) -> Response:
    return build_response(201, data, **kwargs)


def bad_request(message: str, **kwargs: Any) -> Response:
    return build_response(400, message, **kwargs)


def unauthorized(message: str = 'Unauthorized', **kwargs: Any) -> Response:
    return build_response(401, message, **kwargs)


def forbidden(message: str = 'Forbidden', **kwargs: Any) -> Response:
    return build_response(403, message, **kwargs)


def not_found(message: str = 'Resource not found', **kwargs: Any) -> Response:
    return build_response(404, message, **kwargs)


def server_error(message: str = INTERNAL_ERROR_MESSAGE, **kwargs: Any) -> Response:
    return build_response(500, message, **kwargs)
