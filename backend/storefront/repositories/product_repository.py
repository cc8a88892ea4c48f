"""
Product Repository - Data Access Layer for Products and Categories

All catalog queries are centralized here.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from storefront.models.product import Category, Product


class ProductRepository:
    """
    Repository for Product data access

    Works on the caller's session; never commits.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, product_id: int, for_update: bool = False) -> Optional[Product]:
        """
        Find product by ID

        Args:
            product_id: Internal product ID
            for_update: Lock the row until the surrounding transaction ends

        Returns:
            Product or None if not found
        """
        query = self.db.query(Product).filter(Product.id == product_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def find_by_ids(self, product_ids: Iterable[int], for_update: bool = False) -> Dict[int, Product]:
        """
        Load several products at once, keyed by ID

        Rows are locked in ascending ID order when for_update is set, so two
        transactions touching the same products cannot deadlock each other.
        """
        ids = sorted(set(product_ids))
        if not ids:
            return {}

        query = self.db.query(Product).filter(Product.id.in_(ids)).order_by(Product.id)
        if for_update:
            query = query.with_for_update()
        return {product.id: product for product in query.all()}

    def find_all(
        self,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters

        Args:
            search: Case-insensitive search in name
            category_id: Filter by category
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        query = self.db.query(Product)

        if search:
            query = query.filter(Product.name.ilike(f"%{search}%"))

        if category_id is not None:
            query = query.filter(Product.category_id == category_id)

        total = query.count()
        products = query.order_by(Product.name, Product.id).limit(limit).offset(offset).all()

        return products, total

    def add(self, product: Product) -> Product:
        self.db.add(product)
        self.db.flush()
        return product

    def delete(self, product: Product):
        self.db.delete(product)
        self.db.flush()

    def has_order_items(self, product_id: int) -> bool:
        # Imported here to keep the catalog module free of order imports
        from storefront.models.order import OrderItem

        return self.db.query(OrderItem.id).filter(OrderItem.product_id == product_id).first() is not None

    # Categories

    def find_category_by_id(self, category_id: int) -> Optional[Category]:
        return self.db.get(Category, category_id)

    def find_category_by_name(self, name: str) -> Optional[Category]:
        return self.db.query(Category).filter(Category.name == name).first()

    def find_all_categories(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.name).all()

    def add_category(self, category: Category) -> Category:
        self.db.add(category)
        self.db.flush()
        return category
