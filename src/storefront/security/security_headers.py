"""
Security and CORS header configuration for API responses.

Every response carries the same OWASP-recommended header set. CORS is
restricted to an allow-list: a recognised request origin is echoed back,
anything else receives the first allow-listed origin.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

DEFAULT_ALLOWED_ORIGINS = ('http://localhost:3000',)


@dataclass(frozen=True)
class SecurityConfig:
    """Configuration for security headers."""

    allowed_origins: Tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS

    # HSTS (HTTP Strict Transport Security)
    hsts_max_age: int = 31536000  # 1 year
    hsts_include_subdomains: bool = True

    x_frame_options: str = "DENY"
    x_content_type_options: str = "nosniff"
    x_xss_protection: str = "1; mode=block"
    referrer_policy: str = "strict-origin-when-cross-origin"
    cache_control: str = "no-store"

    allow_headers: str = "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token"
    allow_methods: str = "GET,POST,PUT,DELETE,OPTIONS"
    allow_credentials: bool = True

    custom_headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_origins(cls, origins: str) -> 'SecurityConfig':
        """Build a config from a comma separated origin list."""
        allowed = tuple(origin.strip().rstrip('/') for origin in origins.split(',') if origin.strip())
        return cls(allowed_origins=allowed or DEFAULT_ALLOWED_ORIGINS)

    def resolve_origin(self, request_origin: Optional[str]) -> str:
        """Echo an allow-listed origin; fall back to the first allowed origin."""
        if request_origin and request_origin.rstrip('/') in self.allowed_origins:
            return request_origin.rstrip('/')
        return self.allowed_origins[0]

    def headers_for(self, request_origin: Optional[str] = None) -> Dict[str, str]:
        """The full security and CORS header set for one response."""
        hsts_value = f"max-age={self.hsts_max_age}"
        if self.hsts_include_subdomains:
            hsts_value += "; includeSubDomains"

        headers = {
            "Strict-Transport-Security": hsts_value,
            "X-Frame-Options": self.x_frame_options,
            "X-Content-Type-Options": self.x_content_type_options,
            "X-XSS-Protection": self.x_xss_protection,
            "Referrer-Policy": self.referrer_policy,
            "Cache-Control": self.cache_control,
            "Access-Control-Allow-Origin": self.resolve_origin(request_origin),
            "Access-Control-Allow-Headers": self.allow_headers,
            "Access-Control-Allow-Methods": self.allow_methods,
            "Vary": "Origin",
        }
        if self.allow_credentials:
            headers["Access-Control-Allow-Credentials"] = "true"

        headers.update(self.custom_headers)
        return headers


DEFAULT_SECURITY_CONFIG = SecurityConfig()
