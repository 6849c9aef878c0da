"""
Bearer token authentication for the storefront API.

Tokens are HMAC-signed JWTs carrying the user id and email. Verification
never raises: an invalid, tampered or expired token yields None.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

import jwt
from aws_lambda_powertools.metrics import MetricUnit
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError as JWTInvalidTokenError

from storefront.handlers.utils.observability import logger, metrics, tracer

BEARER_PREFIX = 'Bearer '


@dataclass(frozen=True)
class TokenClaims:
    """User claims from a verified bearer token."""

    user_id: str
    email: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class JWTAuthenticator:
    """
    Issues and verifies HMAC-signed JWT bearer tokens.

    Features:
    - Signature and expiry validation against a server-held secret
    - Required ``userId``/``email``/``exp``/``iat`` claims
    - Small leeway for clock skew
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        token_ttl: timedelta = timedelta(hours=24),
        leeway: int = 10,
    ):
        """
        Initialize JWT authenticator.

        Args:
            secret_key: Secret key for HMAC algorithms
            algorithm: JWT algorithm (HS256, HS384, HS512)
            token_ttl: Lifetime of issued tokens
            leeway: Time leeway for token validation (seconds)
        """
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.token_ttl = token_ttl
        self.leeway = leeway

    def issue(self, user_id: str, email: str, now: Optional[datetime] = None) -> str:
        """Sign a token for the user, expiring ``token_ttl`` after ``now``."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            'userId': user_id,
            'email': email,
            'iat': issued_at,
            'exp': issued_at + self.token_ttl,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    @tracer.capture_method
    def authenticate(self, token: str) -> Optional[TokenClaims]:
        """Verify a token and return its claims, or None if it is not acceptable."""
        start_time = time.time()

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                leeway=self.leeway,
                options={'require': ['exp', 'iat', 'userId', 'email']},
            )
            user_claims = self._extract_user_claims(payload)

        except ExpiredSignatureError:
            metrics.add_metric(name="AuthenticationTokenExpired", unit=MetricUnit.Count, value=1)
            logger.warning("JWT token expired")
            return None

        except JWTInvalidTokenError as e:
            metrics.add_metric(name="AuthenticationInvalidToken", unit=MetricUnit.Count, value=1)
            logger.warning("Invalid JWT token", extra={"reason": type(e).__name__})
            return None

        duration_ms = (time.time() - start_time) * 1000
        metrics.add_metric(name="AuthenticationSuccess", unit=MetricUnit.Count, value=1)
        logger.debug("JWT authentication successful", extra={
            "user_id": user_claims.user_id,
            "duration_ms": duration_ms,
        })
        return user_claims

    def _extract_user_claims(self, payload: Dict[str, Any]) -> TokenClaims:
        user_id = payload['userId']
        email = payload['email']
        if not isinstance(user_id, str) or not isinstance(email, str):
            raise JWTInvalidTokenError("userId and email claims must be strings")

        return TokenClaims(
            user_id=user_id,
            email=email,
            issued_at=datetime.fromtimestamp(payload['iat'], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload['exp'], tz=timezone.utc),
        )


def get_authorization_header(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    """Case-insensitive lookup of the Authorization header."""
    if not headers:
        return None
    auth_header = headers.get('Authorization') or headers.get('authorization')
    if auth_header:
        return auth_header
    for name, value in headers.items():
        if name.lower() == 'authorization':
            return value
    return None


def parse_bearer_token(auth_header: str) -> Optional[str]:
    """Return the token of a ``Bearer <token>`` header, or None if malformed."""
    if not auth_header.startswith(BEARER_PREFIX):
        return None
    token = auth_header[len(BEARER_PREFIX):].strip()
    return token or None
