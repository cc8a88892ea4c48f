"""
Authentication Service
Registration, credential checks and the access/refresh token lifecycle
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from storefront.core.auth import (
    REFRESH_TOKEN,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    hash_token,
    verify_password,
)
from storefront.core.config import Settings
from storefront.core.database import atomic
from storefront.core.errors import ConflictError, UnauthorizedError
from storefront.domain.auth import TokenPair
from storefront.models.user import Client, User, UserType
from storefront.repositories.user_repository import UserRepository
from storefront.services.email_service import EmailService

logger = logging.getLogger(__name__)


def new_verification_token(settings: Settings):
    """Random email verification token and its expiry"""
    expires = datetime.now(timezone.utc) + timedelta(hours=settings.EMAIL_VERIFY_TOKEN_HOURS)
    return secrets.token_urlsafe(32), expires


class AuthService:
    def __init__(self, db: Session, settings: Settings, email_service: Optional[EmailService] = None):
        self.db = db
        self.settings = settings
        self.email_service = email_service or EmailService(settings)
        self.users = UserRepository(db)

    def register(
        self,
        email: str,
        password: str,
        name: str,
        user_type: UserType = UserType.CLIENT,
        contact: Optional[str] = None,
        address: Optional[str] = None,
    ) -> User:
        """
        Create an account and send the verification email

        CLIENT accounts get a Client profile named after the user.

        Raises:
            ConflictError: email already registered
        """
        user_type = UserType(user_type)
        token, expires = new_verification_token(self.settings)

        with atomic(self.db):
            if self.users.find_by_email(email) is not None:
                raise ConflictError(f"User with email {email} already exists")

            user = User(
                email=email.lower(),
                password_hash=hash_password(password),
                name=name,
                type=user_type.value,
                email_verified=False,
                email_verify_token=token,
                email_verify_token_expires=expires,
            )
            if user_type == UserType.CLIENT:
                user.client = Client(full_name=name, contact=contact, address=address, status=True)
            self.users.add(user)

        logger.info(f"Registered {user_type.value} user {user.id} ({user.email})")
        self.email_service.send_verification_email(user.email, user.name, token)
        return self.users.find_by_id(user.id)

    def authenticate(self, email: str, password: str) -> User:
        """
        Raises:
            UnauthorizedError: unknown email or wrong password
        """
        user = self.users.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for {email}")
            raise UnauthorizedError("Invalid email or password")
        return user

    def login(self, user: User) -> TokenPair:
        """Issue a token pair and remember the refresh token's hash"""
        access_token = create_access_token(self.settings, user.id, user.email, user.type, user.name)
        refresh_token = create_refresh_token(self.settings, user.id)

        with atomic(self.db):
            user.refresh_token_hash = hash_token(refresh_token)

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

    def refresh(self, refresh_token: str) -> TokenPair:
        """
        Exchange a refresh token for a new pair; the old one stops working

        Raises:
            UnauthorizedError: token invalid, expired, revoked or already rotated
        """
        payload = decode_token(self.settings, refresh_token, REFRESH_TOKEN)

        try:
            user_id = int(payload["sub"])
        except ValueError:
            raise UnauthorizedError("Invalid token payload")

        user = self.users.find_by_id(user_id)
        if user is None or user.refresh_token_hash != hash_token(refresh_token):
            raise UnauthorizedError("Invalid refresh token")

        return self.login(user)

    def logout(self, user_id: int):
        with atomic(self.db):
            user = self.users.find_by_id(user_id)
            if user is not None:
                user.refresh_token_hash = None
        logger.info(f"User {user_id} logged out")
