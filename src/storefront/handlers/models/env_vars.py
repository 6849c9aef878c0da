"""
Environment variable models for type-safe configuration.

The environment is validated once per execution environment and translated
into the explicit configuration objects injected into the services.
"""

from datetime import timedelta
from typing import Annotated, Optional

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field

from storefront.security.security_headers import SecurityConfig


class StorefrontEnvVars(BaseModel):
    """Environment variables for the storefront Lambda handlers."""

    # Single table holding users, products and orders
    TABLE_NAME: Annotated[str, Field(
        description='DynamoDB table name for all entities',
        min_length=1
    )]

    # Token signing
    JWT_SECRET: Annotated[str, Field(
        description='HMAC secret used to sign bearer tokens',
        min_length=32
    )]

    JWT_ALGORITHM: Annotated[str, Field(
        description='JWT signing algorithm',
        pattern=r'^HS(256|384|512)$'
    )] = 'HS256'

    TOKEN_TTL_HOURS: Annotated[int, Field(
        description='Lifetime of issued tokens in hours',
        ge=1,
        le=168
    )] = 24

    PASSWORD_HASH_ROUNDS: Annotated[int, Field(
        description='bcrypt cost factor',
        ge=4,
        le=31
    )] = 10

    # CORS allow-list, comma separated
    ALLOWED_ORIGINS: Annotated[str, Field(
        description='Origins allowed to call the API'
    )] = 'http://localhost:3000'

    # Local DynamoDB endpoint for testing
    DYNAMODB_ENDPOINT: Annotated[Optional[str], Field(
        description='DynamoDB endpoint override'
    )] = None

    AWS_REGION: Annotated[str, Field(
        description='AWS region for service deployment'
    )] = 'us-east-1'

    ENVIRONMENT: Annotated[str, Field(
        description='Deployment environment name',
        pattern=r'^(dev|test|staging|prod)$'
    )] = 'dev'

    ENFORCE_CATALOG_PRICES: Annotated[str, Field(
        description='Reject orders whose item prices differ from the catalog (true/false)',
        pattern=r'^(true|false)$'
    )] = 'false'

    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        description='Service name for AWS Powertools'
    )] = 'storefront'

    LOG_LEVEL: Annotated[str, Field(
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    @property
    def catalog_prices_enforced(self) -> bool:
        return self.ENFORCE_CATALOG_PRICES.lower() == 'true'

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(hours=self.TOKEN_TTL_HOURS)

    @property
    def security_config(self) -> SecurityConfig:
        """CORS and security header configuration for responses."""
        return SecurityConfig.from_origins(self.ALLOWED_ORIGINS)


def get_handler_env_vars() -> StorefrontEnvVars:
    """
    Get typed environment variables for Lambda handlers.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=StorefrontEnvVars)
