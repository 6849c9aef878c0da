"""
Security Module for the storefront service.

This module provides password hashing, bearer token issuance and
verification (``storefront.security.auth``), response security headers,
and log redaction.

``auth`` is not re-exported here because it depends on the observability
utilities, which themselves import the redaction formatter from this package.
"""

from .passwords import PasswordHasher
from .redaction import RedactingFormatter, redact
from .security_headers import DEFAULT_SECURITY_CONFIG, SecurityConfig

__all__ = [
    'PasswordHasher',

    # Security Headers
    'SecurityConfig',
    'DEFAULT_SECURITY_CONFIG',

    # Redaction
    'RedactingFormatter',
    'redact',
]
