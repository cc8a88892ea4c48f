"""
Client Service
Customer profiles attached to CLIENT users
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import ConflictError, NotFoundError
from storefront.domain.user import ClientCreate, ClientUpdate
from storefront.models.user import Client
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def create(self, data: ClientCreate) -> Client:
        """
        Raises:
            NotFoundError: user does not exist
            ConflictError: user already has a client profile
        """
        with atomic(self.db):
            if self.users.find_by_id(data.user_id) is None:
                raise NotFoundError(f"User with ID {data.user_id} not found")
            if self.users.find_client_by_user_id(data.user_id) is not None:
                raise ConflictError(f"User with ID {data.user_id} already has a client profile")

            client = self.users.add_client(
                Client(
                    user_id=data.user_id,
                    full_name=data.full_name,
                    contact=data.contact,
                    address=data.address,
                    status=True,
                )
            )

        logger.info(f"Client {client.id} created for user {data.user_id}")
        return self.find_one(client.id)

    def find_all(self, full_name: Optional[str] = None, status: Optional[bool] = None) -> List[Client]:
        return self.users.find_all_clients(full_name=full_name, status=status)

    def find_one(self, client_id: int) -> Client:
        client = self.users.find_client_by_id(client_id)
        if client is None:
            raise NotFoundError(f"Client with ID {client_id} not found")
        return client

    def find_by_user(self, user_id: int) -> Client:
        client = self.users.find_client_by_user_id(user_id)
        if client is None:
            raise NotFoundError(f"No client profile for user {user_id}")
        return client

    def update(self, client_id: int, data: ClientUpdate) -> Client:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        with atomic(self.db):
            client = self.find_one(client_id)
            for field, value in changes.items():
                setattr(client, field, value)

        return self.find_one(client_id)

    def remove(self, client_id: int):
        """
        Raises:
            ConflictError: client has orders
        """
        with atomic(self.db):
            client = self.find_one(client_id)
            if OrderRepository(self.db).exists_for_client(client_id):
                raise ConflictError(f"Client with ID {client_id} has orders and cannot be deleted")
            self.users.delete_client(client)

        logger.info(f"Client {client_id} deleted")
