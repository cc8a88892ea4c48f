"""
User Repository - Data Access Layer for users and client profiles
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from storefront.models.user import Client, User


class UserRepository:
    """
    Repository for User and Client data access
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).options(joinedload(User.client)).filter(User.id == user_id).first()

    def find_by_email(self, email: str) -> Optional[User]:
        """Email lookups are case-insensitive"""
        return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def find_by_verify_token(self, token: str, now: datetime) -> Optional[User]:
        """Find the user holding an unexpired email verification token"""
        return (
            self.db.query(User)
            .filter(
                User.email_verify_token == token,
                User.email_verify_token_expires > now,
            )
            .first()
        )

    def find_all(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def add(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

    def delete(self, user: User):
        self.db.delete(user)
        self.db.flush()

    # Clients

    def find_client_by_id(self, client_id: int) -> Optional[Client]:
        return self.db.query(Client).options(joinedload(Client.user)).filter(Client.id == client_id).first()

    def find_client_by_user_id(self, user_id: int) -> Optional[Client]:
        return self.db.query(Client).options(joinedload(Client.user)).filter(Client.user_id == user_id).first()

    def find_all_clients(
        self,
        full_name: Optional[str] = None,
        status: Optional[bool] = None,
    ) -> List[Client]:
        """
        Find client profiles

        Args:
            full_name: Case-insensitive partial match on the full name
            status: Filter by active flag
        """
        query = self.db.query(Client).options(joinedload(Client.user))

        if full_name:
            query = query.filter(Client.full_name.ilike(f"%{full_name}%"))

        if status is not None:
            query = query.filter(Client.status == status)

        return query.order_by(Client.full_name, Client.id).all()

    def add_client(self, client: Client) -> Client:
        self.db.add(client)
        self.db.flush()
        return client

    def delete_client(self, client: Client):
        self.db.delete(client)
        self.db.flush()
