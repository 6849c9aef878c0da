"""
Output models for API responses.
"""

from typing import Annotated

from pydantic import Field

from storefront.models.base import CamelModel
from storefront.models.user import UserView


class AuthOutput(CamelModel):
    """Response model for successful registration or login."""

    token: Annotated[str, Field(description='Signed bearer token valid for 24 hours')]
    user: UserView


class DeleteOutput(CamelModel):
    """Acknowledgement of a deletion."""

    message: str = 'Product deleted successfully'
