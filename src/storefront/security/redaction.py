"""
Redaction of sensitive values before they reach logs or error payloads.

Credentials, bearer tokens and secrets must never be written to CloudWatch.
Every structured log record and every error detail passes through
``redact`` first.
"""

import re
from typing import Any

from aws_lambda_powertools.logging.formatter import LambdaPowertoolsFormatter

REDACTED = '[REDACTED]'

SENSITIVE_FIELDS = frozenset({
    'password',
    'password_hash',
    'token',
    'access_token',
    'secret',
    'jwt_secret',
    'key',
    'api_key',
    'authorization',
})

# Matches "password: hunter2", "token=abc", '"secret": "xyz"' inside free text
_INLINE_PATTERN = re.compile(
    r'\b(password|token|secret|key|authorization)\b(["\']?\s*[:=]\s*)(["\']?)(bearer\s+)?[^\s,}"\']+',
    re.IGNORECASE,
)


def is_sensitive(field_name: str) -> bool:
    """Check if a field name carries a credential."""
    return field_name.lower() in SENSITIVE_FIELDS


def redact_text(text: str) -> str:
    """Scrub ``field: value`` fragments of sensitive fields from a string."""
    return _INLINE_PATTERN.sub(lambda match: f'{match.group(1)}{match.group(2)}{match.group(3)}{REDACTED}', text)


def redact(value: Any) -> Any:
    """
    Return a copy of ``value`` with sensitive content replaced.

    Dictionaries are walked recursively and values under sensitive keys are
    replaced wholesale; strings are scrubbed of inline credentials. Other
    values are returned untouched.
    """
    if isinstance(value, dict):
        return {
            key: REDACTED if isinstance(key, str) and is_sensitive(key) else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    if isinstance(value, str):
        return redact_text(value)
    return value


class RedactingFormatter(LambdaPowertoolsFormatter):
    """Powertools JSON formatter that redacts every record before serialization."""

    def serialize(self, log: dict[str, Any]) -> str:
        return super().serialize(log=redact(log))
