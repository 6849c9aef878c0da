"""
Lazily built service instances shared by the handlers.

Services are constructed once per execution environment from the validated
environment and reused across warm invocations. ``reset_services`` clears
them, e.g. between tests.
"""

from typing import Any, Dict

from storefront.dal import EntityStore, get_entity_store
from storefront.dal.credential_store import CredentialStore
from storefront.handlers.models.env_vars import StorefrontEnvVars, get_handler_env_vars
from storefront.handlers.utils.observability import logger
from storefront.logic.auth_service import AuthConfig, AuthService
from storefront.logic.order_service import OrderService
from storefront.logic.product_service import ProductService
from storefront.security.security_headers import SecurityConfig

# Global service instances, keyed by service name
_services: Dict[str, Any] = {}


def get_env_vars() -> StorefrontEnvVars:
    if 'env_vars' not in _services:
        _services['env_vars'] = get_handler_env_vars()
    return _services['env_vars']


def get_security_config() -> SecurityConfig:
    if 'security_config' not in _services:
        _services['security_config'] = get_env_vars().security_config
    return _services['security_config']


def get_store() -> EntityStore:
    """Get or create the entity store for the configured table."""
    if 'store' not in _services:
        env_vars = get_env_vars()
        _services['store'] = get_entity_store(
            table_name=env_vars.TABLE_NAME,
            region_name=env_vars.AWS_REGION,
            endpoint_url=env_vars.DYNAMODB_ENDPOINT,
        )
    return _services['store']


def get_auth_service() -> AuthService:
    if 'auth' not in _services:
        env_vars = get_env_vars()
        config = AuthConfig(
            jwt_secret=env_vars.JWT_SECRET,
            jwt_algorithm=env_vars.JWT_ALGORITHM,
            token_ttl=env_vars.token_ttl,
            password_hash_rounds=env_vars.PASSWORD_HASH_ROUNDS,
        )
        _services['auth'] = AuthService(credential_store=CredentialStore(get_store()), config=config)
    return _services['auth']


def get_product_service() -> ProductService:
    if 'products' not in _services:
        _services['products'] = ProductService(entity_store=get_store())
    return _services['products']


def get_order_service() -> OrderService:
    if 'orders' not in _services:
        _services['orders'] = OrderService(
            entity_store=get_store(),
            enforce_catalog_prices=get_env_vars().catalog_prices_enforced,
        )
    return _services['orders']


def reset_services() -> None:
    """Drop every service instance so the next request rebuilds them."""
    _services.clear()
    logger.debug('Service instances cleared')
