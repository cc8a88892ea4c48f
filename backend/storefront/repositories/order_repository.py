"""
Order Repository - Data Access Layer for Orders

Handles all database operations for orders and their line items.
"""
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from storefront.models.order import Order, OrderItem, OrderStatus


class OrderRepository:
    """
    Repository for Order data access
    """

    def __init__(self, db: Session):
        self.db = db

    def _with_items(self):
        return self.db.query(Order).options(
            selectinload(Order.items).selectinload(OrderItem.product)
        )

    def find_by_id(self, order_id: int) -> Optional[Order]:
        """
        Find order by ID with its items and their products loaded

        Args:
            order_id: Order ID

        Returns:
            Order or None if not found
        """
        return self._with_items().filter(Order.id == order_id).first()

    def find_by_id_for_update(self, order_id: int) -> Optional[Order]:
        """
        Find and lock an order row until the transaction ends

        The lock covers the order row only; items load lazily afterwards.
        """
        return (
            self.db.query(Order)
            .filter(Order.id == order_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def find_all(
        self,
        status: Optional[OrderStatus] = None,
        client_id: Optional[int] = None,
    ) -> List[Order]:
        """
        Find orders, newest first

        Args:
            status: Filter by order status
            client_id: Filter by owning client
        """
        query = self._with_items()

        if status is not None:
            query = query.filter(Order.status == status.value)

        if client_id is not None:
            query = query.filter(Order.client_id == client_id)

        return query.order_by(Order.order_date.desc(), Order.id.desc()).all()

    def exists_for_client(self, client_id: int) -> bool:
        return self.db.query(Order.id).filter(Order.client_id == client_id).first() is not None

    def add(self, order: Order) -> Order:
        self.db.add(order)
        self.db.flush()
        return order
