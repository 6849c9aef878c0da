"""
Business logic for registration, login and request authorization.

Every protected handler goes through ``AuthService.authorize``; there is no
other code path that inspects the Authorization header.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

from aws_lambda_powertools.metrics import MetricUnit

from storefront.dal.credential_store import CredentialStore
from storefront.handlers.utils.errors import AuthenticationError, ConflictError
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.models.input import LoginRequest, RegisterRequest
from storefront.models.output import AuthOutput
from storefront.models.user import User
from storefront.security.auth import (
    JWTAuthenticator,
    TokenClaims,
    get_authorization_header,
    parse_bearer_token,
)
from storefront.security.passwords import DEFAULT_ROUNDS, PasswordHasher

INVALID_CREDENTIALS = 'Invalid credentials'
MISSING_HEADER = 'Authorization header required'
MALFORMED_HEADER = 'Invalid authorization format. Use: Bearer <token>'
INVALID_TOKEN = 'Invalid or expired token'


@dataclass(frozen=True)
class AuthConfig:
    """Secrets and policy knobs for the auth service."""

    jwt_secret: str
    jwt_algorithm: str = 'HS256'
    token_ttl: timedelta = timedelta(hours=24)
    password_hash_rounds: int = DEFAULT_ROUNDS


class AuthService:
    """Registers users, checks credentials and guards protected operations."""

    def __init__(self, credential_store: CredentialStore, config: AuthConfig) -> None:
        self.credential_store = credential_store
        self.config = config
        self.authenticator = JWTAuthenticator(
            secret_key=config.jwt_secret,
            algorithm=config.jwt_algorithm,
            token_ttl=config.token_ttl,
        )
        self.password_hasher = PasswordHasher(rounds=config.password_hash_rounds)

    @tracer.capture_method
    def register(self, request: RegisterRequest) -> AuthOutput:
        """
        Create a user and sign them in.

        Raises:
            ConflictError: If the email is already registered
        """
        if self.credential_store.find_by_email(request.email) is not None:
            metrics.add_metric(name="RegistrationConflict", unit=MetricUnit.Count, value=1)
            raise ConflictError("User already exists")

        user = User.create(
            email=request.email,
            name=request.name,
            password_hash=self.password_hasher.hash(request.password),
        )
        self.credential_store.create(user)

        metrics.add_metric(name="UserRegistered", unit=MetricUnit.Count, value=1)
        logger.info("User registered", extra={"user_id": user.user_id})

        return self._sign_in(user)

    @tracer.capture_method
    def login(self, request: LoginRequest) -> AuthOutput:
        """
        Exchange an email and password for a token.

        Unknown emails and wrong passwords fail identically so the response
        cannot be used to discover which accounts exist. Both paths pay for
        one bcrypt verification.

        Raises:
            AuthenticationError: If the credentials do not match a user
        """
        user = self.credential_store.find_by_email(request.email)
        if user is None:
            verified = self.password_hasher.dummy_verify()
        else:
            verified = self.password_hasher.verify(request.password, user.password_hash)

        if not verified:
            metrics.add_metric(name="LoginFailed", unit=MetricUnit.Count, value=1)
            logger.info("Login rejected")
            raise AuthenticationError(INVALID_CREDENTIALS)

        metrics.add_metric(name="LoginSucceeded", unit=MetricUnit.Count, value=1)
        logger.info("User logged in", extra={"user_id": user.user_id})

        return self._sign_in(user)

    def verify(self, token: str) -> Optional[TokenClaims]:
        """Validate signature and expiry; None for anything unacceptable."""
        return self.authenticator.authenticate(token)

    @tracer.capture_method
    def authorize(self, headers: Optional[Mapping[str, str]]) -> TokenClaims:
        """
        Resolve the caller from a ``Authorization: Bearer <token>`` header.

        Args:
            headers: Request headers (any header-name casing)

        Returns:
            Claims of the authenticated caller

        Raises:
            AuthenticationError: If the header is absent, malformed, or the
                token is invalid or expired
        """
        auth_header = get_authorization_header(headers)
        if not auth_header:
            raise AuthenticationError(MISSING_HEADER)

        token = parse_bearer_token(auth_header)
        if token is None:
            raise AuthenticationError(MALFORMED_HEADER)

        claims = self.verify(token)
        if claims is None:
            raise AuthenticationError(INVALID_TOKEN)

        tracer.put_annotation("user_id", claims.user_id)
        return claims

    def _sign_in(self, user: User) -> AuthOutput:
        token = self.authenticator.issue(user_id=user.user_id, email=user.email)
        return AuthOutput(token=token, user=user.public_view())
