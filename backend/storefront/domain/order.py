"""
Order Domain Models

Request and response schemas for orders and payments.
"""
import enum
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.domain.common import Money
from storefront.models.order import OrderStatus


class PaymentStatus(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    DECLINED = "DECLINED"


class CreateOrderItem(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)


class CreateOrderRequest(BaseModel):
    client_id: int
    items: List[CreateOrderItem] = Field(..., min_length=1)


class PaymentConfirmationRequest(BaseModel):
    status: PaymentStatus


class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatus


class OrderItem(BaseModel):
    """
    Line item captured at order time

    Fields:
        product_id: Reference to product catalog
        quantity: Number of units ordered
        unit_price: Product price when the order was created
        subtotal: quantity * unit_price
    """
    id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: int = Field(..., ge=1)
    unit_price: Money
    subtotal: Money

    model_config = ConfigDict(from_attributes=True)


class Order(BaseModel):
    id: int
    client_id: int
    status: OrderStatus
    total: Money
    order_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItem] = []

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, order) -> "Order":
        """Build from an ORM order, pulling product names through the relationship"""
        return cls(
            id=order.id,
            client_id=order.client_id,
            status=OrderStatus(order.status),
            total=order.total,
            order_date=order.order_date,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItem(
                    id=item.id,
                    product_id=item.product_id,
                    product_name=item.product.name if item.product is not None else None,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=item.subtotal,
                )
                for item in order.items
            ],
        )
