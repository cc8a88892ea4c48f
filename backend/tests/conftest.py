"""
Pytest fixtures and configuration for Storefront backend tests

Every test gets a fresh in-memory SQLite database. API tests run the real
application through FastAPI's TestClient with email and blob storage
replaced by mocks.
"""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from storefront.core.auth import create_access_token, hash_password
from storefront.core.config import Settings
from storefront.core.database import Database
from storefront.main import create_app
from storefront.models.product import Category, Product
from storefront.models.user import Client, User, UserType
from storefront.services.email_service import EmailService
from storefront.services.storage_service import StorageService

SIGNED_URL = "https://storage.example.com/signed/report.csv"


@pytest.fixture
def settings(tmp_path):
    """
    Provides isolated settings: in-memory database, no SMTP, no storage
    """
    return Settings(
        DATABASE_URL="sqlite://",
        AUTO_CREATE_TABLES=False,
        JWT_SECRET="test-access-secret",
        JWT_REFRESH_SECRET="test-refresh-secret",
        LOGIN_RATE_LIMIT=5,
        LOGIN_RATE_WINDOW_SECONDS=900,
        SMTP_HOST="",
        SUPABASE_URL="",
        SUPABASE_SERVICE_ROLE_KEY="",
        REPORTS_DIR=str(tmp_path / "reports"),
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def database(settings):
    """
    Provides a Database with all tables created

    Scope: function (fresh schema per test)
    """
    database = Database(settings.DATABASE_URL)
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture
def db_session(database):
    session = database.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def email_service():
    return MagicMock(spec=EmailService)


@pytest.fixture
def storage_service():
    storage = MagicMock(spec=StorageService)
    storage.upload.return_value = SIGNED_URL
    storage.get_url.return_value = SIGNED_URL
    return storage


@pytest.fixture
def app(settings, database, email_service, storage_service):
    return create_app(
        settings=settings,
        database=database,
        email_service=email_service,
        storage_service=storage_service,
    )


@pytest.fixture
def client(app):
    return TestClient(app)


# Accounts

@pytest.fixture
def admin_user(db_session):
    user = User(
        email="admin@example.com",
        name="Admin User",
        password_hash=hash_password("admin123"),
        type=UserType.ADMIN.value,
        email_verified=True,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def client_user(db_session):
    user = User(
        email="client@example.com",
        name="Test Client",
        password_hash=hash_password("client123"),
        type=UserType.CLIENT.value,
        email_verified=True,
    )
    user.client = Client(full_name="Test Client", contact="1234567890", address="123 Test St", status=True)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def client_profile(client_user):
    return client_user.client


@pytest.fixture
def admin_headers(settings, admin_user):
    token = create_access_token(settings, admin_user.id, admin_user.email, admin_user.type, admin_user.name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client_headers(settings, client_user):
    token = create_access_token(settings, client_user.id, client_user.email, client_user.type, client_user.name)
    return {"Authorization": f"Bearer {token}"}


# Catalog

@pytest.fixture
def sample_category(db_session):
    category = Category(name="Snacks", description="Bars and bites")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture
def sample_product_data(sample_category):
    """
    Provides sample product data for tests
    """
    return {
        "name": "Keto Cocoa Bar",
        "description": "Low sugar cocoa bar",
        "price": "19.99",
        "stock": 10,
        "category_id": sample_category.id,
    }


@pytest.fixture
def product(db_session, sample_category):
    """Product with stock 10 at 19.99"""
    product = Product(
        name="Keto Cocoa Bar",
        description="Low sugar cocoa bar",
        price=Decimal("19.99"),
        stock=10,
        category_id=sample_category.id,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture
def second_product(db_session, sample_category):
    """Product with stock 5 at 5.50"""
    product = Product(
        name="Granola Bites",
        price=Decimal("5.50"),
        stock=5,
        category_id=sample_category.id,
    )
    db_session.add(product)
    db_session.commit()
    return product
