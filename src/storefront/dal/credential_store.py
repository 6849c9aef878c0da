"""
Credential store: user identity records on top of the entity store.
"""

from typing import Optional

from storefront.dal import EntityStore
from storefront.dal.dynamodb_handler import ConditionalCheckFailedError
from storefront.handlers.utils.errors import ConflictError
from storefront.handlers.utils.observability import logger, tracer
from storefront.models.user import USER_TYPE, User


class CredentialStore:
    """User records keyed by email with the ``user`` type discriminator."""

    def __init__(self, entity_store: EntityStore) -> None:
        self.entity_store = entity_store

    @tracer.capture_method
    def find_by_email(self, email: str) -> Optional[User]:
        item = self.entity_store.get(email, USER_TYPE)
        if item is None:
            return None
        return User.model_validate(item)

    @tracer.capture_method
    def create(self, user: User) -> User:
        """
        Persist a new user.

        The write is conditional on the key being absent, so two concurrent
        registrations for the same email cannot both succeed.

        Raises:
            ConflictError: If a user with this email already exists
        """
        try:
            self.entity_store.put(user.to_dict(), only_if_absent=True)
        except ConditionalCheckFailedError:
            logger.info("User record already exists", extra={"user_id": user.user_id})
            raise ConflictError("User already exists") from None
        return user
