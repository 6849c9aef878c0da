"""
Pytest configuration and shared fixtures for the storefront service.

The environment is configured at import time, before any storefront module
is imported, because the Powertools utilities read it on construction.
"""

import json
import os
from typing import Any, Callable, Dict, Optional
from unittest.mock import Mock

import pytest

TABLE_NAME = "test-storefront-table"
TEST_JWT_SECRET = "test-secret-key-that-is-at-least-32-characters"
TEST_PASSWORD = "Abc12345!"

os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "test",
    "AWS_SECRET_ACCESS_KEY": "test",
    "TABLE_NAME": TABLE_NAME,
    "JWT_SECRET": TEST_JWT_SECRET,
    "PASSWORD_HASH_ROUNDS": "4",
    "ALLOWED_ORIGINS": "http://localhost:3000,https://shop.example.com",
    "ENVIRONMENT": "test",
    "POWERTOOLS_SERVICE_NAME": "test-storefront",
    "POWERTOOLS_METRICS_NAMESPACE": "TestStorefront",
    "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    "LOG_LEVEL": "DEBUG",
})

import boto3  # noqa: E402
from moto import mock_aws  # noqa: E402

from storefront.dal.credential_store import CredentialStore  # noqa: E402
from storefront.dal.dynamodb_handler import DynamoDBHandler  # noqa: E402
from storefront.handlers.utils.observability import metrics  # noqa: E402
from storefront.handlers.utils.service_factory import reset_services  # noqa: E402
from storefront.logic.auth_service import AuthConfig, AuthService  # noqa: E402
from storefront.logic.order_service import OrderService  # noqa: E402
from storefront.logic.product_service import ProductService  # noqa: E402
from storefront.security.auth import TokenClaims  # noqa: E402


# DynamoDB fixtures
@pytest.fixture
def dynamodb_table():
    """Create a mock single-table DynamoDB table for testing."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        table = dynamodb.create_table(
            TableName=TABLE_NAME,
            KeySchema=[
                {"AttributeName": "id", "KeyType": "HASH"},
                {"AttributeName": "type", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "id", "AttributeType": "S"},
                {"AttributeName": "type", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        table.wait_until_exists()
        yield table


@pytest.fixture
def entity_store(dynamodb_table) -> DynamoDBHandler:
    return DynamoDBHandler(TABLE_NAME, region_name="us-east-1")


# Service fixtures
@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(jwt_secret=TEST_JWT_SECRET, password_hash_rounds=4)


@pytest.fixture
def auth_service(entity_store, auth_config) -> AuthService:
    return AuthService(credential_store=CredentialStore(entity_store), config=auth_config)


@pytest.fixture
def product_service(entity_store) -> ProductService:
    return ProductService(entity_store=entity_store)


@pytest.fixture
def order_service(entity_store) -> OrderService:
    return OrderService(entity_store=entity_store)


# Sample data fixtures
@pytest.fixture
def sample_product_data() -> Dict[str, Any]:
    return {"name": "Pen", "price": 1.5, "category": "office", "stock": 10}


@pytest.fixture
def sample_order_data() -> Dict[str, Any]:
    """Sample order body as a client would send it."""
    return {
        "items": [
            {"productId": "prod-1", "quantity": 2, "price": 1.5},
            {"productId": "prod-2", "quantity": 1, "price": 10.25},
        ],
        "shippingAddress": {
            "street": "1 Main St",
            "city": "Springfield",
            "state": "IL",
            "zipCode": "62701",
            "country": "US",
        },
    }


@pytest.fixture
def alice() -> TokenClaims:
    return TokenClaims(user_id="user-alice", email="alice@example.com")


@pytest.fixture
def bob() -> TokenClaims:
    return TokenClaims(user_id="user-bob", email="bob@example.com")


# Lambda fixtures
@pytest.fixture
def api_gateway_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway REST proxy events."""

    def make_event(
        method: str,
        path: str,
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        token: Optional[str] = None,
    ) -> Dict[str, Any]:
        request_headers = {
            "Content-Type": "application/json",
            "User-Agent": "test-agent/1.0",
        }
        if token is not None:
            request_headers["Authorization"] = f"Bearer {token}"
        request_headers.update(headers or {})

        if body is not None and not isinstance(body, str):
            body = json.dumps(body)

        return {
            "httpMethod": method,
            "path": path,
            "resource": path,
            "headers": request_headers,
            "body": body,
            "requestContext": {
                "requestId": "test-request-id-123",
                "accountId": "123456789012",
                "stage": "test",
                "httpMethod": method,
                "path": path,
                "protocol": "HTTP/1.1",
                "requestTime": "2024-01-01T12:00:00.000Z",
                "requestTimeEpoch": 1704110400000,
                "identity": {
                    "sourceIp": "127.0.0.1",
                    "userAgent": "test-agent/1.0",
                },
            },
            "pathParameters": None,
            "queryStringParameters": None,
            "multiValueQueryStringParameters": None,
            "stageVariables": None,
            "isBase64Encoded": False,
        }

    return make_event


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-storefront-function"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-storefront-function"
    context.memory_limit_in_mb = 512
    context.get_remaining_time_in_millis = lambda: 30000
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-storefront-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    return context


# Error simulation fixtures
@pytest.fixture
def mock_dynamodb_error():
    """Build botocore ClientErrors for testing error translation."""
    from botocore.exceptions import ClientError

    def create_error(error_code: str, message: str = "Test error"):
        return ClientError(
            error_response={
                "Error": {
                    "Code": error_code,
                    "Message": message,
                }
            },
            operation_name="TestOperation"
        )

    return create_error


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached services and buffered metrics between tests."""
    reset_services()
    metrics.clear_metrics()
    yield
    reset_services()
    metrics.clear_metrics()
