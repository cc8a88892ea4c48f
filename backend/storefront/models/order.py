"""
Orders and their line items
"""
import enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.core.database import Base


class OrderStatus(str, enum.Enum):
    RECEIVED = "RECEIVED"
    IN_PREPARATION = "IN_PREPARATION"
    DISPATCHED = "DISPATCHED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


VALID_TRANSITIONS = {
    OrderStatus.RECEIVED: (OrderStatus.IN_PREPARATION, OrderStatus.CANCELLED),
    OrderStatus.IN_PREPARATION: (OrderStatus.DISPATCHED, OrderStatus.CANCELLED),
    OrderStatus.DISPATCHED: (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
    OrderStatus.DELIVERED: (),
    OrderStatus.CANCELLED: (),
}

# Statuses reached only after payment confirmed, i.e. stock already decremented
STOCK_COMMITTED_STATUSES = frozenset({OrderStatus.IN_PREPARATION, OrderStatus.DISPATCHED})


class Order(Base):
    """
    Placed order. Items and unit prices are frozen at creation; only
    ``status`` changes afterwards.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=OrderStatus.RECEIVED.value, index=True)
    total = Column(Numeric(12, 2), nullable=False)

    order_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id")

    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    # Captured at order time
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")
