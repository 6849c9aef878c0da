"""
User domain model.

A user is stored under its email address (``id``) with the ``user`` type
discriminator. The stored record keeps the bcrypt hash in ``password``; the
public view never does.
"""

from typing import Annotated, Literal
from uuid import uuid4

from pydantic import Field

from storefront.models.base import CamelModel, utc_now

USER_TYPE = 'user'


class UserView(CamelModel):
    """Public representation of a user returned to callers."""

    user_id: str
    email: str
    name: str


class User(CamelModel):
    """Stored user identity record."""

    id: Annotated[str, Field(description='Email address, the natural key')]
    type: Literal['user'] = USER_TYPE
    user_id: Annotated[str, Field(description='Opaque immutable user identifier')]
    name: str
    password_hash: Annotated[str, Field(alias='password', description='Salted one-way password hash')]
    created_at: str

    @property
    def email(self) -> str:
        return self.id

    @classmethod
    def create(cls, email: str, name: str, password_hash: str) -> 'User':
        """Create a new user with a generated user id and creation timestamp."""
        return cls(
            id=email,
            user_id=str(uuid4()),
            name=name,
            password_hash=password_hash,
            created_at=utc_now(),
        )

    def public_view(self) -> UserView:
        return UserView(user_id=self.user_id, email=self.email, name=self.name)
