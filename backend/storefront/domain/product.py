"""
Product Domain Models

Request and response schemas for the catalog.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.domain.common import Money


class CategoryCreate(BaseModel):
    """Schema for creating a category"""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Unit price")
    stock: int = Field(0, ge=0, description="Units available")
    category_id: Optional[int] = Field(None, description="Category ID")


class ProductUpdate(BaseModel):
    """Schema for updating an existing product"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = None

    @field_validator("name", "price", "stock")
    def reject_null(cls, v):
        # description and category_id may be cleared, these may not
        if v is None:
            raise ValueError("may not be null")
        return v


class Product(BaseModel):
    """
    Product domain model - represents a product in the catalog

    Fields:
        id: Internal product ID (primary key)
        name: Product name
        description: Product description (optional)
        price: Current unit price
        stock: Units available for sale
        category_id: Category (optional)
        created_at: When product was created
        updated_at: When product was last updated
    """
    id: int = Field(..., description="Internal product ID")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Money = Field(..., description="Unit price")
    stock: int = Field(..., description="Current stock level", ge=0)
    category_id: Optional[int] = Field(None, description="Category ID")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock <= 0


class ProductList(BaseModel):
    total: int
    limit: int
    offset: int
    data: List[Product]
