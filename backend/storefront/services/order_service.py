"""
Order Service
Order creation, payment confirmation and the order status state machine

Purpose:
- Snapshot cart/order lines with the live product price
- Keep Product.stock consistent with order status
- Reject every transition outside VALID_TRANSITIONS

Stock rules:
- Creating an order only checks stock, it never reserves it
- Entering IN_PREPARATION from RECEIVED (payment confirmed, or an admin
  confirming the order) decrements stock for every line
- Cancelling from IN_PREPARATION or DISPATCHED gives the stock back
- Cancelling from RECEIVED leaves stock untouched
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import BadRequestError, NotFoundError
from storefront.core.metrics import order_status_transitions
from storefront.domain.common import quantize_money
from storefront.domain.order import PaymentStatus
from storefront.models.order import (
    STOCK_COMMITTED_STATUSES,
    VALID_TRANSITIONS,
    Order,
    OrderItem,
    OrderStatus,
)
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class OrderService:
    """
    Service for the order lifecycle

    Every public mutating method runs in its own transaction: either the
    status change and all stock movements commit together, or nothing does.
    """

    def __init__(self, db: Session):
        self.db = db
        self.orders = OrderRepository(db)
        self.products = ProductRepository(db)
        self.users = UserRepository(db)

    # Creation

    def create(self, client_id: int, items: Iterable) -> Order:
        """
        Create an order in RECEIVED status

        Args:
            client_id: Owning client profile
            items: Objects with ``product_id`` and ``quantity``

        Returns:
            The persisted order with its items

        Raises:
            NotFoundError: client or a product does not exist
            BadRequestError: empty order, or a quantity above current stock
        """
        with atomic(self.db):
            order = self.place_order(client_id, items)

        logger.info(f"Order {order.id} created for client {client_id}: total={order.total}")
        return self.find_one(order.id)

    def place_order(self, client_id: int, items: Iterable) -> Order:
        """
        Validate and stage a new order on the session without committing

        The caller owns the transaction (see ``create`` and cart checkout).
        """
        quantities = self._sum_quantities(items)
        if not quantities:
            raise BadRequestError("Order must contain at least one item")

        if self.users.find_client_by_id(client_id) is None:
            raise NotFoundError(f"Client with ID {client_id} not found")

        products = self.products.find_by_ids(quantities.keys())

        order = Order(client_id=client_id, status=OrderStatus.RECEIVED.value)
        total = Decimal("0.00")

        for product_id, quantity in quantities.items():
            product = products.get(product_id)
            if product is None:
                raise NotFoundError(f"Product with ID {product_id} not found")

            if quantity > product.stock:
                raise BadRequestError(
                    f"Insufficient stock for product '{product.name}'. "
                    f"Available: {product.stock}, requested: {quantity}"
                )

            unit_price = quantize_money(product.price)
            subtotal = quantize_money(unit_price * quantity)
            total += subtotal

            order.items.append(
                OrderItem(
                    product_id=product.id,
                    quantity=quantity,
                    unit_price=unit_price,
                    subtotal=subtotal,
                )
            )

        order.total = quantize_money(total)
        return self.orders.add(order)

    @staticmethod
    def _sum_quantities(items: Iterable) -> Dict[int, int]:
        """Merge repeated product ids, keeping first-seen order"""
        quantities: Dict[int, int] = {}
        for item in items:
            if item.quantity < 1:
                raise BadRequestError(f"Quantity for product {item.product_id} must be at least 1")
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
        return quantities

    # Payment

    def confirm_payment(self, order_id: int, status: PaymentStatus) -> Order:
        """
        Apply a payment result to a RECEIVED order

        CONFIRMED decrements stock and moves the order to IN_PREPARATION;
        DECLINED cancels it without touching stock.

        Raises:
            NotFoundError: order does not exist
            BadRequestError: order is not RECEIVED, or stock ran out since creation
        """
        status = PaymentStatus(status)

        with atomic(self.db):
            order = self._get_for_update(order_id)
            current = order.current_status

            if current != OrderStatus.RECEIVED:
                raise BadRequestError(
                    f"Payment can only be confirmed for orders in {OrderStatus.RECEIVED.value} "
                    f"status. Current status: {current.value}"
                )

            target = OrderStatus.IN_PREPARATION if status == PaymentStatus.CONFIRMED else OrderStatus.CANCELLED
            self._apply_transition(order, current, target)

        self._record_transition(order_id, current, target)
        logger.info(f"Payment {status.value} for order {order_id}")
        return self.find_one(order_id)

    # State machine

    def update_order_status(self, order_id: int, new_status: OrderStatus) -> Order:
        """
        Move an order to ``new_status``

        Raises:
            NotFoundError: order does not exist
            BadRequestError: transition not allowed from the current status
        """
        new_status = OrderStatus(new_status)

        with atomic(self.db):
            order = self._get_for_update(order_id)
            current = order.current_status
            self._apply_transition(order, current, new_status)

        self._record_transition(order_id, current, new_status)
        return self.find_one(order_id)

    def confirm_order(self, order_id: int) -> Order:
        return self.update_order_status(order_id, OrderStatus.IN_PREPARATION)

    def dispatch_order(self, order_id: int) -> Order:
        return self.update_order_status(order_id, OrderStatus.DISPATCHED)

    def deliver_order(self, order_id: int) -> Order:
        return self.update_order_status(order_id, OrderStatus.DELIVERED)

    def cancel_order(self, order_id: int) -> Order:
        return self.update_order_status(order_id, OrderStatus.CANCELLED)

    def _apply_transition(self, order: Order, current: OrderStatus, target: OrderStatus):
        allowed = VALID_TRANSITIONS[current]
        if target not in allowed:
            valid = ", ".join(s.value for s in allowed) or "none"
            raise BadRequestError(
                f"Invalid status transition from {current.value} to {target.value}. "
                f"Valid transitions: {valid}"
            )

        if current == OrderStatus.RECEIVED and target == OrderStatus.IN_PREPARATION:
            self._decrement_stock(order)
        elif target == OrderStatus.CANCELLED and current in STOCK_COMMITTED_STATUSES:
            self._restore_stock(order)

        order.status = target.value

    def _line_quantities(self, order: Order) -> Dict[int, int]:
        quantities: Dict[int, int] = {}
        for item in order.items:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
        return quantities

    def _decrement_stock(self, order: Order):
        quantities = self._line_quantities(order)
        products = self.products.find_by_ids(quantities.keys(), for_update=True)

        for product_id, quantity in quantities.items():
            product = products.get(product_id)
            if product is None:
                raise NotFoundError(f"Product with ID {product_id} not found")
            if product.stock < quantity:
                raise BadRequestError(
                    f"Insufficient stock for product '{product.name}'. "
                    f"Available: {product.stock}, required: {quantity}"
                )
            product.stock -= quantity

        self.db.flush()

    def _restore_stock(self, order: Order):
        quantities = self._line_quantities(order)
        products = self.products.find_by_ids(quantities.keys(), for_update=True)

        for product_id, quantity in quantities.items():
            products[product_id].stock += quantity

        self.db.flush()

    def _get_for_update(self, order_id: int) -> Order:
        order = self.orders.find_by_id_for_update(order_id)
        if order is None:
            raise NotFoundError(f"Order with ID {order_id} not found")
        return order

    @staticmethod
    def _record_transition(order_id: int, current: OrderStatus, target: OrderStatus):
        order_status_transitions.labels(current.value, target.value).inc()
        logger.info(f"Order {order_id}: {current.value} -> {target.value}")

    # Queries

    def find_one(self, order_id: int) -> Order:
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order with ID {order_id} not found")
        return order

    def find_all(self, status: Optional[OrderStatus] = None) -> List[Order]:
        return self.orders.find_all(status=status)

    def find_for_client(self, client_id: int) -> List[Order]:
        return self.orders.find_all(client_id=client_id)
