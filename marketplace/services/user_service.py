"""User lookups and registration."""
import logging
from typing import Any, Dict, Optional

from marketplace.errors import ValidationError
from marketplace.schemas import User
from marketplace.storage import EntityKind, Storage

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("username", "email", "password", "first_name", "last_name")


class UserService:
    """User accounts; username and email are unique."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def get_user(self, user_id: str) -> Optional[User]:
        return self.storage.get(EntityKind.USERS, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next(iter(self.storage.filter(EntityKind.USERS, username=username)), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return next(iter(self.storage.filter(EntityKind.USERS, email=email)), None)

    def create_user(self, data: Dict[str, Any]) -> User:
        """
        Register a user.

        Raises:
            ValidationError: If a required field is missing, or the
                username or email is already taken
        """
        errors = [
            {"field": field, "message": f"{field} is required"}
            for field in REQUIRED_FIELDS if not data.get(field)
        ]
        if errors:
            raise ValidationError("Invalid user data", errors)

        if self.get_user_by_username(data["username"]) is not None:
            raise ValidationError.for_field("username", "Username already taken")
        if self.get_user_by_email(data["email"]) is not None:
            raise ValidationError.for_field("email", "Email already registered")

        user = self.storage.create(EntityKind.USERS, data)
        logger.info("User created", extra={"user_id": user.id})
        return user

    def ensure_user(self, user_id: str, profile: Dict[str, Any]) -> User:
        """
        Return the user with ``user_id``, registering it from ``profile`` first if absent.

        Used to give the placeholder request identity a real account.
        """
        user = self.get_user(user_id)
        if user is not None:
            return user

        user = User.model_validate({**profile, "id": user_id})
        self.storage.load(EntityKind.USERS, [user])
        logger.info("Registered placeholder user", extra={"user_id": user_id})
        return user
