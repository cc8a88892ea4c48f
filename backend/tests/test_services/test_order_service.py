"""
Unit tests for OrderService

Covers order creation, payment confirmation and the status state machine,
including the stock movements tied to each transition.
"""
from decimal import Decimal
from types import SimpleNamespace

import pytest

from storefront.core.errors import BadRequestError, NotFoundError
from storefront.domain.order import CreateOrderItem, PaymentStatus
from storefront.models.order import VALID_TRANSITIONS, OrderStatus
from storefront.services.order_service import OrderService


def line(product_id, quantity):
    return CreateOrderItem(product_id=product_id, quantity=quantity)


@pytest.fixture
def service(db_session):
    return OrderService(db_session)


@pytest.fixture
def order(service, client_profile, product, second_product):
    """RECEIVED order: 3 x product (19.99) + 2 x second_product (5.50)"""
    return service.create(client_profile.id, [line(product.id, 3), line(second_product.id, 2)])


class TestCreateOrder:
    """Test OrderService.create"""

    def test_create_order_captures_prices_and_total(self, order, product, second_product):
        """Test order lines snapshot the product price and sum into the total"""
        # Assert
        assert order.status == OrderStatus.RECEIVED.value
        assert len(order.items) == 2

        by_product = {item.product_id: item for item in order.items}
        assert by_product[product.id].unit_price == Decimal("19.99")
        assert by_product[product.id].subtotal == Decimal("59.97")
        assert by_product[second_product.id].subtotal == Decimal("11.00")
        assert order.total == Decimal("70.97")

    def test_total_equals_sum_of_subtotals(self, order):
        """Test sum(item.subtotal) == order.total"""
        assert sum(item.subtotal for item in order.items) == order.total

    def test_create_does_not_touch_stock(self, db_session, order, product, second_product):
        """Test stock is only checked at creation, never decremented"""
        db_session.refresh(product)
        db_session.refresh(second_product)

        assert product.stock == 10
        assert second_product.stock == 5

    def test_create_sums_repeated_products_before_stock_check(self, service, client_profile, product):
        """Test two lines of 6 for a product with stock 10 are rejected"""
        # Act / Assert
        with pytest.raises(BadRequestError, match="Insufficient stock"):
            service.create(client_profile.id, [line(product.id, 6), line(product.id, 6)])

        assert service.find_all() == []

    def test_create_merges_repeated_products_into_one_line(self, service, client_profile, product):
        """Test repeated product ids become a single order line"""
        # Act
        order = service.create(client_profile.id, [line(product.id, 2), line(product.id, 3)])

        # Assert
        assert len(order.items) == 1
        assert order.items[0].quantity == 5
        assert order.total == Decimal("99.95")

    def test_create_rejects_quantity_above_stock(self, service, client_profile, product):
        """Test BadRequest when a quantity exceeds current stock"""
        with pytest.raises(BadRequestError):
            service.create(client_profile.id, [line(product.id, 11)])

    def test_create_rejects_empty_order(self, service, client_profile):
        """Test BadRequest on an empty item list"""
        with pytest.raises(BadRequestError, match="at least one item"):
            service.create(client_profile.id, [])

    def test_create_unknown_client_raises_not_found(self, service, product):
        """Test NotFound when the client does not exist"""
        with pytest.raises(NotFoundError, match="Client"):
            service.create(999, [line(product.id, 1)])

    def test_create_unknown_product_rolls_back_everything(self, service, client_profile, product):
        """Test NotFound for a missing product leaves no partial order behind"""
        with pytest.raises(NotFoundError, match="Product"):
            service.create(client_profile.id, [line(product.id, 1), line(999, 1)])

        assert service.find_all() == []

    def test_create_rejects_non_positive_quantity(self, service, client_profile, product):
        """Test quantities below 1 are rejected even without schema validation"""
        with pytest.raises(BadRequestError):
            service.create(client_profile.id, [SimpleNamespace(product_id=product.id, quantity=0)])


class TestConfirmPayment:
    """Test OrderService.confirm_payment"""

    def test_confirmed_payment_decrements_stock(self, db_session, service, order, product, second_product):
        """Test CONFIRMED moves to IN_PREPARATION and takes stock"""
        # Act
        result = service.confirm_payment(order.id, PaymentStatus.CONFIRMED)

        # Assert
        assert result.status == OrderStatus.IN_PREPARATION.value
        db_session.refresh(product)
        db_session.refresh(second_product)
        assert product.stock == 7
        assert second_product.stock == 3

    def test_declined_payment_cancels_without_stock_change(self, db_session, service, order, product):
        """Test DECLINED cancels the order and leaves stock alone"""
        result = service.confirm_payment(order.id, PaymentStatus.DECLINED)

        assert result.status == OrderStatus.CANCELLED.value
        db_session.refresh(product)
        assert product.stock == 10

    def test_second_payment_confirmation_fails(self, db_session, service, order, product):
        """Test confirm_payment is only valid from RECEIVED"""
        # Arrange
        service.confirm_payment(order.id, PaymentStatus.CONFIRMED)

        # Act / Assert
        with pytest.raises(BadRequestError, match="RECEIVED"):
            service.confirm_payment(order.id, PaymentStatus.CONFIRMED)

        db_session.refresh(product)
        assert product.stock == 7

    def test_payment_for_unknown_order_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.confirm_payment(999, PaymentStatus.CONFIRMED)

    def test_insufficient_stock_at_payment_rolls_back(
        self, db_session, service, order, product, second_product
    ):
        """Test a shortage on one product leaves every product and the status unchanged"""
        # Arrange: stock of the second product drops below the ordered quantity
        second_product.stock = 1
        db_session.commit()

        # Act
        with pytest.raises(BadRequestError, match="Insufficient stock"):
            service.confirm_payment(order.id, PaymentStatus.CONFIRMED)

        # Assert
        db_session.expire_all()
        assert product.stock == 10
        assert second_product.stock == 1
        assert service.find_one(order.id).status == OrderStatus.RECEIVED.value


class TestStatusTransitions:
    """Test OrderService.update_order_status and the convenience transitions"""

    def test_happy_path_to_delivered(self, service, order):
        """Test RECEIVED -> IN_PREPARATION -> DISPATCHED -> DELIVERED"""
        service.confirm_payment(order.id, PaymentStatus.CONFIRMED)
        service.dispatch_order(order.id)
        result = service.deliver_order(order.id)

        assert result.status == OrderStatus.DELIVERED.value

    @pytest.mark.parametrize("current", list(OrderStatus))
    def test_invalid_transitions_are_rejected(self, db_session, service, order, current):
        """Test every transition outside the table fails and leaves state unchanged"""
        # Arrange: force the order into `current`
        stored = service.find_one(order.id)
        stored.status = current.value
        db_session.commit()

        for target in OrderStatus:
            if target in VALID_TRANSITIONS[current]:
                continue

            # Act / Assert
            with pytest.raises(BadRequestError, match="Invalid status transition"):
                service.update_order_status(order.id, target)
            assert service.find_one(order.id).status == current.value

    def test_error_lists_valid_targets(self, service, order):
        with pytest.raises(BadRequestError) as exc_info:
            service.deliver_order(order.id)

        assert "RECEIVED to DELIVERED" in exc_info.value.detail
        assert "IN_PREPARATION, CANCELLED" in exc_info.value.detail

    def test_cancel_before_payment_leaves_stock_untouched(self, db_session, service, order, product, second_product):
        """Test cancelling a RECEIVED order never adds stock"""
        result = service.cancel_order(order.id)

        assert result.status == OrderStatus.CANCELLED.value
        db_session.refresh(product)
        db_session.refresh(second_product)
        assert product.stock == 10
        assert second_product.stock == 5

    @pytest.mark.parametrize("dispatch", [False, True])
    def test_cancel_after_payment_restores_exact_quantities(
        self, db_session, service, order, product, second_product, dispatch
    ):
        """Test cancelling from IN_PREPARATION or DISPATCHED gives back what was taken"""
        # Arrange
        service.confirm_payment(order.id, PaymentStatus.CONFIRMED)
        if dispatch:
            service.dispatch_order(order.id)

        # Act
        service.cancel_order(order.id)

        # Assert
        db_session.refresh(product)
        db_session.refresh(second_product)
        assert product.stock == 10
        assert second_product.stock == 5

    def test_admin_confirmation_takes_stock_like_payment(self, db_session, service, order, product):
        """Test confirm_order decrements stock so a later cancel restores it exactly"""
        service.confirm_order(order.id)
        db_session.refresh(product)
        assert product.stock == 7

        service.cancel_order(order.id)
        db_session.refresh(product)
        assert product.stock == 10

    def test_cancelled_order_cannot_be_cancelled_again(self, db_session, service, order, product):
        service.confirm_payment(order.id, PaymentStatus.CONFIRMED)
        service.cancel_order(order.id)

        with pytest.raises(BadRequestError):
            service.cancel_order(order.id)

        db_session.refresh(product)
        assert product.stock == 10

    def test_update_unknown_order_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.update_order_status(999, OrderStatus.CANCELLED)


class TestOrderQueries:
    """Test OrderService find methods"""

    def test_find_for_client_only_returns_own_orders(self, db_session, service, order, client_profile):
        assert [o.id for o in service.find_for_client(client_profile.id)] == [order.id]
        assert service.find_for_client(999) == []

    def test_find_all_filters_by_status(self, service, order):
        assert len(service.find_all(status=OrderStatus.RECEIVED)) == 1
        assert service.find_all(status=OrderStatus.DELIVERED) == []

    def test_find_one_missing_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.find_one(999)
