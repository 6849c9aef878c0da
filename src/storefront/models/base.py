"""
Shared model configuration and helpers.

The HTTP API and the table both use camelCase attribute names, while the
Python side uses snake_case; the alias generator bridges the two.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary using the camelCase names."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class RequestModel(CamelModel):
    """Base model for request bodies; unknown attributes are rejected."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='forbid')
