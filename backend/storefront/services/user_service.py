"""
User Service
Account administration, email verification and profile updates
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from storefront.core.config import Settings
from storefront.core.database import atomic
from storefront.core.errors import ConflictError, NotFoundError
from storefront.domain.user import ProfileUpdate, UserUpdate
from storefront.models.user import User, UserType
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.user_repository import UserRepository
from storefront.services.auth_service import new_verification_token
from storefront.services.email_service import EmailService

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session, settings: Settings, email_service: Optional[EmailService] = None):
        self.db = db
        self.settings = settings
        self.email_service = email_service or EmailService(settings)
        self.users = UserRepository(db)

    def find_all(self) -> List[User]:
        return self.users.find_all()

    def find_one(self, user_id: int) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    def update(self, user_id: int, data: UserUpdate) -> User:
        """
        Raises:
            NotFoundError: user does not exist
            ConflictError: new email belongs to another user
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        with atomic(self.db):
            user = self.find_one(user_id)

            if "email" in changes:
                changes["email"] = changes["email"].lower()
                other = self.users.find_by_email(changes["email"])
                if other is not None and other.id != user.id:
                    raise ConflictError(f"User with email {changes['email']} already exists")

            if "type" in changes:
                changes["type"] = UserType(changes["type"]).value

            for field, value in changes.items():
                setattr(user, field, value)

        return self.find_one(user_id)

    def remove(self, user_id: int):
        """
        Delete a user together with their client profile and cart

        Raises:
            ConflictError: the user's client profile has orders
        """
        with atomic(self.db):
            user = self.find_one(user_id)
            if user.client is not None and OrderRepository(self.db).exists_for_client(user.client.id):
                raise ConflictError(f"User with ID {user_id} has orders and cannot be deleted")
            self.users.delete(user)

        logger.info(f"User {user_id} deleted")

    def verify_email(self, token: str) -> User:
        """
        Raises:
            NotFoundError: token unknown or expired
        """
        with atomic(self.db):
            user = self.users.find_by_verify_token(token, datetime.now(timezone.utc))
            if user is None:
                raise NotFoundError("Invalid or expired verification token")

            user.email_verified = True
            user.email_verify_token = None
            user.email_verify_token_expires = None

        logger.info(f"User {user.id} verified their email")
        return user

    def resend_verification(self, email: str) -> str:
        """
        Issue a fresh verification token and email it

        Returns:
            Message describing the outcome

        Raises:
            NotFoundError: no user with that email
        """
        user = self.users.find_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        if user.email_verified:
            return "Email already verified"

        token, expires = new_verification_token(self.settings)
        with atomic(self.db):
            user.email_verify_token = token
            user.email_verify_token_expires = expires

        self.email_service.send_verification_email(user.email, user.name, token)
        return "Verification email sent"

    def update_profile(self, user_id: int, data: ProfileUpdate) -> User:
        """Update the user's name and, for clients, their contact details"""
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        with atomic(self.db):
            user = self.find_one(user_id)

            if "name" in changes:
                user.name = changes["name"]
                if user.client is not None:
                    user.client.full_name = changes["name"]

            if user.client is not None:
                for field in ("contact", "address"):
                    if field in changes:
                        setattr(user.client, field, changes[field])

        return self.find_one(user_id)
