"""
Input models for request validation using Pydantic.

This module defines all input models used for validating incoming request
bodies before any domain logic runs.
"""

import re
from typing import Annotated, List, Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator

from storefront.models.base import RequestModel

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
MIN_PASSWORD_LENGTH = 8


def _normalize_email(v: str) -> str:
    if not re.match(EMAIL_PATTERN, v):
        raise ValueError('Invalid email format')
    return v.lower()


class RegisterRequest(RequestModel):
    """Request model for user registration."""

    email: Annotated[str, Field(
        description='Email address, used as the login name',
        examples=['ann@example.com']
    )]

    password: Annotated[str, Field(
        description='Plaintext password, hashed before storage',
        examples=['Abc12345!']
    )]

    name: Annotated[str, Field(
        min_length=2,
        max_length=50,
        description='Display name',
        examples=['Ann']
    )]

    @field_validator('email')
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        """Validate and normalize the email address."""
        return _normalize_email(v)

    @field_validator('password')
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        """Require length and a mix of character classes."""
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'password must be at least {MIN_PASSWORD_LENGTH} characters long')
        if not re.search(r'[a-z]', v):
            raise ValueError('password must contain at least one lowercase letter')
        if not re.search(r'[A-Z]', v):
            raise ValueError('password must contain at least one uppercase letter')
        if not re.search(r'\d', v):
            raise ValueError('password must contain at least one digit')
        if not re.search(r'[^a-zA-Z0-9]', v):
            raise ValueError('password must contain at least one symbol')
        return v


class LoginRequest(RequestModel):
    """Request model for user login."""

    email: Annotated[str, Field(examples=['ann@example.com'])]
    password: Annotated[str, Field(min_length=1)]

    @field_validator('email')
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        """Validate and normalize the email address."""
        return _normalize_email(v)


def _validate_image_url(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    parsed = urlparse(v)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError('imageUrl must be a valid uri')
    return v


class CreateProductRequest(RequestModel):
    """Request model for creating a product."""

    name: Annotated[str, Field(min_length=1, max_length=200, examples=['Pen'])]

    description: Annotated[Optional[str], Field(
        min_length=1,
        max_length=2000,
    )] = None

    price: Annotated[float, Field(gt=0, allow_inf_nan=False, description='Unit price', examples=[1.5])]

    category: Annotated[str, Field(min_length=1, max_length=100, examples=['office'])]

    stock: Annotated[int, Field(ge=0, description='Units in stock', examples=[10])]

    image_url: Annotated[Optional[str], Field(examples=['https://cdn.example.com/pen.png'])] = None

    @field_validator('image_url')
    @classmethod
    def validate_image_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate that the image URL is absolute."""
        return _validate_image_url(v)


class UpdateProductRequest(RequestModel):
    """Request model for a partial product update; same rules as creation, all optional."""

    name: Annotated[Optional[str], Field(min_length=1, max_length=200)] = None
    description: Annotated[Optional[str], Field(min_length=1, max_length=2000)] = None
    price: Annotated[Optional[float], Field(gt=0, allow_inf_nan=False)] = None
    category: Annotated[Optional[str], Field(min_length=1, max_length=100)] = None
    stock: Annotated[Optional[int], Field(ge=0)] = None
    image_url: Optional[str] = None

    @field_validator('image_url')
    @classmethod
    def validate_image_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate that the image URL is absolute."""
        return _validate_image_url(v)

    @model_validator(mode='after')
    def reject_explicit_nulls(self) -> 'UpdateProductRequest':
        """A field that is sent must carry a value; null does not clear it."""
        for field_name in self.model_fields_set:
            if getattr(self, field_name) is None:
                raise ValueError(f'{type(self).model_fields[field_name].alias} must not be null')
        return self

    def changed_fields(self) -> dict:
        """Only the attributes the caller actually sent, keyed by their stored names."""
        return self.model_dump(mode='json', by_alias=True, exclude_unset=True)


class OrderItemRequest(RequestModel):
    """A single line of an order."""

    product_id: Annotated[str, Field(min_length=1)]
    quantity: Annotated[int, Field(ge=1)]
    price: Annotated[float, Field(gt=0, allow_inf_nan=False)]


class ShippingAddressRequest(RequestModel):
    """Shipping address; every field is required."""

    street: Annotated[str, Field(min_length=1)]
    city: Annotated[str, Field(min_length=1)]
    state: Annotated[str, Field(min_length=1)]
    zip_code: Annotated[str, Field(min_length=1)]
    country: Annotated[str, Field(min_length=1)]


class CreateOrderRequest(RequestModel):
    """Request model for placing an order."""

    items: Annotated[List[OrderItemRequest], Field(min_length=1)]
    shipping_address: ShippingAddressRequest
