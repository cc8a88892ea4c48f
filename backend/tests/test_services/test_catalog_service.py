"""
Unit tests for ProductService, CategoryService and ClientService
"""
from decimal import Decimal

import pytest

from storefront.core.errors import ConflictError, NotFoundError
from storefront.domain.order import CreateOrderItem
from storefront.domain.product import CategoryCreate, ProductCreate, ProductUpdate
from storefront.domain.user import ClientCreate, ClientUpdate
from storefront.services.cart_service import CartService
from storefront.services.client_service import ClientService
from storefront.services.order_service import OrderService
from storefront.services.product_service import CategoryService, ProductService


class TestProductService:
    """Test ProductService CRUD"""

    def test_create_product(self, db_session, sample_product_data):
        # Act
        product = ProductService(db_session).create(ProductCreate(**sample_product_data))

        # Assert
        assert product.id is not None
        assert product.price == Decimal("19.99")
        assert product.stock == 10

    def test_create_with_unknown_category_raises_not_found(self, db_session, sample_product_data):
        data = ProductCreate(**{**sample_product_data, "category_id": 999})

        with pytest.raises(NotFoundError, match="Category"):
            ProductService(db_session).create(data)

    def test_find_all_searches_and_paginates(self, db_session, product, second_product):
        service = ProductService(db_session)

        found, total = service.find_all(search="granola")
        assert [p.id for p in found] == [second_product.id]
        assert total == 1

        page, total = service.find_all(limit=1, offset=1)
        assert total == 2
        assert [p.name for p in page] == ["Keto Cocoa Bar"]

    def test_update_applies_only_given_fields(self, db_session, product):
        updated = ProductService(db_session).update(product.id, ProductUpdate(price=Decimal("21.50")))

        assert updated.price == Decimal("21.50")
        assert updated.name == "Keto Cocoa Bar"
        assert updated.stock == 10

    def test_find_one_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            ProductService(db_session).find_one(999)

    def test_remove_drops_product_from_carts(self, db_session, client_profile, product):
        # Arrange
        CartService(db_session).add_to_cart(client_profile.id, product.id, 1)

        # Act
        ProductService(db_session).remove(product.id)

        # Assert
        assert CartService(db_session).get_cart(client_profile.id) == []
        with pytest.raises(NotFoundError):
            ProductService(db_session).find_one(product.id)

    def test_remove_product_with_orders_conflicts(self, db_session, client_profile, product):
        OrderService(db_session).create(client_profile.id, [CreateOrderItem(product_id=product.id, quantity=1)])

        with pytest.raises(ConflictError):
            ProductService(db_session).remove(product.id)


class TestCategoryService:
    def test_duplicate_category_name_conflicts(self, db_session, sample_category):
        with pytest.raises(ConflictError):
            CategoryService(db_session).create(CategoryCreate(name=sample_category.name))

    def test_find_all_sorted_by_name(self, db_session, sample_category):
        service = CategoryService(db_session)
        service.create(CategoryCreate(name="Beverages"))

        assert [c.name for c in service.find_all()] == ["Beverages", "Snacks"]


class TestClientService:
    """Test ClientService"""

    def test_create_profile_for_admin_user(self, db_session, admin_user):
        client = ClientService(db_session).create(
            ClientCreate(user_id=admin_user.id, full_name="Admin Buyer", contact="555", address="HQ")
        )

        assert client.user_id == admin_user.id
        assert client.status is True
        assert client.user.email == admin_user.email

    def test_create_for_unknown_user_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            ClientService(db_session).create(ClientCreate(user_id=999, full_name="X", contact="1", address="Y"))

    def test_second_profile_for_user_conflicts(self, db_session, client_user):
        with pytest.raises(ConflictError):
            ClientService(db_session).create(
                ClientCreate(user_id=client_user.id, full_name="Again", contact="1", address="Y")
            )

    def test_find_all_filters(self, db_session, client_profile):
        service = ClientService(db_session)
        service.update(client_profile.id, ClientUpdate(status=False))

        assert [c.id for c in service.find_all(full_name="test")] == [client_profile.id]
        assert service.find_all(status=True) == []
        assert len(service.find_all(status=False)) == 1

    def test_find_by_user(self, db_session, client_user):
        assert ClientService(db_session).find_by_user(client_user.id).id == client_user.client.id

    def test_remove_client_with_orders_conflicts(self, db_session, client_profile, product):
        OrderService(db_session).create(client_profile.id, [CreateOrderItem(product_id=product.id, quantity=1)])

        with pytest.raises(ConflictError):
            ClientService(db_session).remove(client_profile.id)

    def test_remove_client(self, db_session, client_profile):
        service = ClientService(db_session)
        client_id = client_profile.id

        service.remove(client_id)

        with pytest.raises(NotFoundError):
            service.find_one(client_id)
