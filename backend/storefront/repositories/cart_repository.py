"""
Cart Repository - Data Access Layer for cart items
"""
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from storefront.models.cart import CartItem


class CartRepository:
    """Cart rows are always scoped to their owning client"""

    def __init__(self, db: Session):
        self.db = db

    def find_item(self, client_id: int, item_id: int) -> Optional[CartItem]:
        return (
            self.db.query(CartItem)
            .options(joinedload(CartItem.product))
            .filter(CartItem.id == item_id, CartItem.client_id == client_id)
            .first()
        )

    def find_by_product(self, client_id: int, product_id: int) -> Optional[CartItem]:
        return (
            self.db.query(CartItem)
            .filter(CartItem.client_id == client_id, CartItem.product_id == product_id)
            .first()
        )

    def find_for_client(self, client_id: int) -> List[CartItem]:
        return (
            self.db.query(CartItem)
            .options(joinedload(CartItem.product))
            .filter(CartItem.client_id == client_id)
            .order_by(CartItem.id)
            .all()
        )

    def add(self, item: CartItem) -> CartItem:
        self.db.add(item)
        self.db.flush()
        return item

    def delete(self, item: CartItem):
        self.db.delete(item)
        self.db.flush()

    def delete_for_client(self, client_id: int) -> int:
        """Delete every cart row of a client, returning how many were removed"""
        removed = (
            self.db.query(CartItem)
            .filter(CartItem.client_id == client_id)
            .delete(synchronize_session="fetch")
        )
        self.db.flush()
        return removed

    def delete_for_product(self, product_id: int) -> int:
        """Drop a product from every cart"""
        removed = (
            self.db.query(CartItem)
            .filter(CartItem.product_id == product_id)
            .delete(synchronize_session="fetch")
        )
        self.db.flush()
        return removed
