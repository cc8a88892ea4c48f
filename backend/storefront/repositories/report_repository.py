"""
Report Repository - sales aggregation queries and stored report records
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import and_, exists, func
from sqlalchemy.orm import Session

from storefront.models.order import Order, OrderItem, OrderStatus
from storefront.models.product import Product
from storefront.models.report import Report
from storefront.models.user import Client, User, UserType


class ReportRepository:
    """
    Read-only aggregation over historical orders, plus Report persistence

    Date bounds are half-open: ``start <= order_date < end``.
    """

    def __init__(self, db: Session):
        self.db = db

    def _filter_orders(self, query, start: datetime, end: datetime, client_type: Optional[UserType]):
        query = query.filter(
            Order.status != OrderStatus.CANCELLED.value,
            Order.order_date >= start,
            Order.order_date < end,
        )
        if client_type is not None:
            query = (
                query.join(Client, Client.id == Order.client_id)
                .join(User, User.id == Client.user_id)
                .filter(User.type == client_type.value)
            )
        return query

    def sales_by_product(
        self,
        start: datetime,
        end: datetime,
        product_name: Optional[str] = None,
        client_type: Optional[UserType] = None,
    ) -> List[dict]:
        """
        Aggregate order lines per product

        Returns:
            List of dicts with product_id, product_name, total_orders,
            total_quantity, total_revenue and average_price, highest
            revenue first
        """
        revenue = func.sum(OrderItem.subtotal).label("total_revenue")
        query = (
            self.db.query(
                Product.id.label("product_id"),
                Product.name.label("product_name"),
                func.count(OrderItem.id).label("total_orders"),
                func.sum(OrderItem.quantity).label("total_quantity"),
                revenue,
                func.avg(OrderItem.unit_price).label("average_price"),
            )
            .select_from(OrderItem)
            .join(Order, Order.id == OrderItem.order_id)
            .join(Product, Product.id == OrderItem.product_id)
        )
        query = self._filter_orders(query, start, end, client_type)

        if product_name:
            query = query.filter(Product.name.ilike(f"%{product_name}%"))

        rows = query.group_by(Product.id, Product.name).order_by(revenue.desc(), Product.id).all()

        return [
            {
                "product_id": row.product_id,
                "product_name": row.product_name,
                "total_orders": int(row.total_orders or 0),
                "total_quantity": int(row.total_quantity or 0),
                "total_revenue": Decimal(str(row.total_revenue or 0)),
                "average_price": Decimal(str(row.average_price or 0)),
            }
            for row in rows
        ]

    def sales_totals(
        self,
        start: datetime,
        end: datetime,
        product_name: Optional[str] = None,
        client_type: Optional[UserType] = None,
    ) -> Tuple[int, Decimal]:
        """
        Distinct order count and revenue for the same filters

        With a product filter, only orders containing at least one matching
        product are counted, and their full totals are summed.
        """
        query = self.db.query(func.count(Order.id), func.sum(Order.total)).select_from(Order)
        query = self._filter_orders(query, start, end, client_type)

        if product_name:
            query = query.filter(
                exists().where(
                    and_(
                        OrderItem.order_id == Order.id,
                        OrderItem.product_id == Product.id,
                        Product.name.ilike(f"%{product_name}%"),
                    )
                )
            )

        count, revenue = query.one()
        return int(count or 0), Decimal(str(revenue or 0))

    def find_by_id(self, report_id: int) -> Optional[Report]:
        return self.db.get(Report, report_id)

    def find_all(self) -> List[Report]:
        return self.db.query(Report).order_by(Report.created_at.desc(), Report.id.desc()).all()

    def add(self, report: Report) -> Report:
        self.db.add(report)
        self.db.flush()
        return report
