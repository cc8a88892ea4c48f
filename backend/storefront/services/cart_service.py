"""
Cart Service
Per-client shopping cart validated against live product stock

Carts never reserve stock: every mutation re-reads Product.stock and
rejects quantities above it, but nothing is decremented until an order
is paid.
"""
import logging
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import BadRequestError, NotFoundError
from storefront.domain.common import quantize_money
from storefront.models.cart import CartItem
from storefront.models.order import Order
from storefront.models.product import Product
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.services.order_service import OrderService

logger = logging.getLogger(__name__)


class CartService:
    def __init__(self, db: Session):
        self.db = db
        self.cart = CartRepository(db)
        self.products = ProductRepository(db)

    def add_to_cart(self, client_id: int, product_id: int, quantity: int) -> CartItem:
        """
        Add ``quantity`` units of a product, merging with an existing line

        Raises:
            NotFoundError: product does not exist
            BadRequestError: resulting quantity exceeds current stock
        """
        self._check_quantity(quantity)

        try:
            item_id, new_quantity = self._add_line(client_id, product_id, quantity)
        except IntegrityError:
            # A concurrent first add created the line; apply this one as an increment
            item_id, new_quantity = self._add_line(client_id, product_id, quantity)

        logger.info(f"Client {client_id} cart: product {product_id} -> {new_quantity}")
        return self.cart.find_item(client_id, item_id)

    def _add_line(self, client_id: int, product_id: int, quantity: int) -> Tuple[int, int]:
        with atomic(self.db):
            # Product row lock serializes adds of the same product
            product = self._get_product(product_id, for_update=True)
            item = self.cart.find_by_product(client_id, product_id)

            new_quantity = quantity + (item.quantity if item else 0)
            self._check_stock(product, new_quantity)

            if item:
                item.quantity = new_quantity
                self.db.flush()
            else:
                item = self.cart.add(CartItem(client_id=client_id, product_id=product_id, quantity=new_quantity))
            return item.id, new_quantity

    def update_cart_item(self, client_id: int, item_id: int, quantity: int) -> CartItem:
        """
        Set the quantity of one of the client's cart lines

        Raises:
            NotFoundError: item does not belong to the client
            BadRequestError: quantity exceeds current stock
        """
        self._check_quantity(quantity)

        with atomic(self.db):
            item = self._get_item(client_id, item_id)
            self._check_stock(item.product, quantity)
            item.quantity = quantity

        return self.cart.find_item(client_id, item_id)

    def remove_from_cart(self, client_id: int, item_id: int):
        with atomic(self.db):
            item = self._get_item(client_id, item_id)
            self.cart.delete(item)

    def get_cart(self, client_id: int) -> List[CartItem]:
        return self.cart.find_for_client(client_id)

    def clear_cart(self, client_id: int) -> int:
        """Empty the cart, returning the number of removed lines"""
        with atomic(self.db):
            removed = self.cart.delete_for_client(client_id)
        return removed

    def get_cart_total(self, client_id: int) -> Decimal:
        """Sum of price * quantity over the cart, at current prices"""
        total = Decimal("0.00")
        for item in self.cart.find_for_client(client_id):
            total += quantize_money(item.product.price * item.quantity)
        return quantize_money(total)

    def checkout(self, client_id: int) -> Order:
        """
        Turn the cart into a RECEIVED order and empty it, atomically

        Raises:
            BadRequestError: cart is empty, or a line exceeds current stock
            NotFoundError: client does not exist
        """
        order_service = OrderService(self.db)

        with atomic(self.db):
            items = self.cart.find_for_client(client_id)
            if not items:
                raise BadRequestError("Cart is empty")

            order = order_service.place_order(client_id, items)
            self.cart.delete_for_client(client_id)

        logger.info(f"Client {client_id} checked out {len(items)} cart lines into order {order.id}")
        return order_service.find_one(order.id)

    @staticmethod
    def _check_quantity(quantity: int):
        if quantity < 1:
            raise BadRequestError("Quantity must be at least 1")

    @staticmethod
    def _check_stock(product: Product, quantity: int):
        if quantity > product.stock:
            raise BadRequestError(
                f"Insufficient stock for product '{product.name}'. "
                f"Available: {product.stock}, requested: {quantity}"
            )

    def _get_product(self, product_id: int, for_update: bool = False) -> Product:
        product = self.products.find_by_id(product_id, for_update=for_update)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return product

    def _get_item(self, client_id: int, item_id: int) -> CartItem:
        item = self.cart.find_item(client_id, item_id)
        if item is None:
            raise NotFoundError(f"Cart item with ID {item_id} not found")
        return item
