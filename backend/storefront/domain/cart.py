"""
Cart request/response schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.domain.common import Money


class AddToCartRequest(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class CartProduct(BaseModel):
    id: int
    name: str
    price: Money
    stock: int

    model_config = ConfigDict(from_attributes=True)


class CartItem(BaseModel):
    id: int
    client_id: int
    product_id: int
    quantity: int
    product: CartProduct
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CartTotal(BaseModel):
    total: Money
    item_count: int


class CartCleared(BaseModel):
    removed: int
