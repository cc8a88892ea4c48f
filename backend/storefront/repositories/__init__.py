"""
Repository Layer - Data Access

This layer handles all database queries on the caller's SQLAlchemy session.
Repositories abstract away query details from business logic and never commit.
"""
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.report_repository import ReportRepository
from storefront.repositories.user_repository import UserRepository

__all__ = [
    'CartRepository',
    'OrderRepository',
    'ProductRepository',
    'ReportRepository',
    'UserRepository',
]
