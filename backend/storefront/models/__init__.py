"""
Database models
"""
from .user import User, Client, UserType
from .product import Category, Product
from .cart import CartItem
from .order import Order, OrderItem, OrderStatus
from .report import Report

__all__ = [
    "User",
    "Client",
    "UserType",
    "Category",
    "Product",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Report",
]
