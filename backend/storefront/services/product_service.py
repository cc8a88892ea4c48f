"""
Product Catalog Service
Product and category management on top of ProductRepository
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import ConflictError, NotFoundError
from storefront.domain.common import quantize_money
from storefront.domain.product import CategoryCreate, ProductCreate, ProductUpdate
from storefront.models.product import Category, Product
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service for catalog products

    Handles:
    - Create/update/delete with category checks
    - Name search with pagination
    """

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)

    def create(self, data: ProductCreate) -> Product:
        with atomic(self.db):
            self._check_category(data.category_id)
            product = self.products.add(
                Product(
                    name=data.name,
                    description=data.description,
                    price=quantize_money(data.price),
                    stock=data.stock,
                    category_id=data.category_id,
                )
            )

        logger.info(f"Product {product.id} created: {data.name}")
        return self.find_one(product.id)

    def find_all(
        self,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[Product], int]:
        return self.products.find_all(search=search, category_id=category_id, limit=limit, offset=offset)

    def find_one(self, product_id: int) -> Product:
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return product

    def update(self, product_id: int, data: ProductUpdate) -> Product:
        """Apply the fields present in ``data``"""
        changes = data.model_dump(exclude_unset=True)

        with atomic(self.db):
            product = self.find_one(product_id)
            if "category_id" in changes:
                self._check_category(changes["category_id"])
            if changes.get("price") is not None:
                changes["price"] = quantize_money(changes["price"])
            for field, value in changes.items():
                setattr(product, field, value)

        logger.info(f"Product {product_id} updated: {sorted(changes)}")
        return self.find_one(product_id)

    def remove(self, product_id: int):
        """
        Delete a product and drop it from every cart

        Raises:
            ConflictError: product is referenced by orders
        """
        with atomic(self.db):
            product = self.find_one(product_id)
            if self.products.has_order_items(product_id):
                raise ConflictError(f"Product with ID {product_id} has orders and cannot be deleted")
            CartRepository(self.db).delete_for_product(product_id)
            self.products.delete(product)

        logger.info(f"Product {product_id} deleted")

    def _check_category(self, category_id: Optional[int]):
        if category_id is not None and self.products.find_category_by_id(category_id) is None:
            raise NotFoundError(f"Category with ID {category_id} not found")


class CategoryService:
    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)

    def create(self, data: CategoryCreate) -> Category:
        with atomic(self.db):
            if self.products.find_category_by_name(data.name) is not None:
                raise ConflictError(f"Category '{data.name}' already exists")
            category = self.products.add_category(Category(name=data.name, description=data.description))
        return category

    def find_all(self) -> List[Category]:
        return self.products.find_all_categories()
