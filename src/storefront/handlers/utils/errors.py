"""
Error taxonomy and error handling utilities for the storefront handlers.

Every failure a caller can observe is one of the service errors below. The
handler boundary converts them to an HTTP status and the standard response
envelope; anything else becomes a generic 500.
"""

import uuid
from enum import Enum
from typing import Any, Dict, Optional

from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.security.redaction import redact


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    SECURITY = "SECURITY"


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
        retry_after: Optional[int] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.retry_after = retry_after
        self.user_message = user_message or "Internal server error"
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a redacted dictionary for logging."""
        return redact({
            "error_id": self.error_id,
            "error_code": self.error_code,
            "error_message": self.message,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "category": self.category.value,
            "retry_after": self.retry_after,
        })


class ValidationError(BaseServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            user_message=message,
        )


class ConflictError(BaseServiceError):
    """Raised when a unique key is already taken."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="CONFLICT",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
            user_message=message,
        )


class AuthenticationError(BaseServiceError):
    """Raised for missing, malformed, invalid or expired credentials."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="AUTHENTICATION_FAILED",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.SECURITY,
            user_message=message,
        )


class AuthorizationError(BaseServiceError):
    """Raised when an authenticated caller touches a resource they do not own."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(
            message=message,
            error_code="ACCESS_DENIED",
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.SECURITY,
            user_message=message,
        )


class ResourceNotFoundError(BaseServiceError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            message=f"{resource_type} with ID '{resource_id}' not found",
            error_code="RESOURCE_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
            user_message=f"{resource_type} not found",
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# Authorization failures share 401 with authentication failures so that a
# wrong owner cannot be told apart from a bad token.
_STATUS_MAPPING = {
    "VALIDATION_ERROR": 400,
    "CONFLICT": 400,
    "AUTHENTICATION_FAILED": 401,
    "ACCESS_DENIED": 401,
    "RESOURCE_NOT_FOUND": 404,
}


def get_http_status_code(error: BaseServiceError) -> int:
    """Get appropriate HTTP status code for error."""
    return _STATUS_MAPPING.get(error.error_code, 500)


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""
    metrics.add_metric(name="ErrorCount", unit="Count", value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit="Count", value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_annotation("error_category", error.category.value)

    log = logger.error if get_http_status_code(error) >= 500 else logger.warning
    log("Service error occurred", extra=error.to_dict())
