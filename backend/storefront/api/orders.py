"""
Orders API Endpoints
Order creation, payment confirmation and status transitions

Operations that move stock (payment, confirm, cancel) drop the cached
product responses so the catalog shows current stock.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_cache, require_client
from storefront.api.products import CACHE_NAMESPACE
from storefront.core.auth import TokenUser, require_permission
from storefront.core.cache import TTLCache
from storefront.core.database import get_db
from storefront.domain.order import (
    CreateOrderRequest,
    Order,
    OrderStatusUpdateRequest,
    PaymentConfirmationRequest,
)
from storefront.models.order import OrderStatus
from storefront.models.user import Client
from storefront.services.order_service import OrderService

router = APIRouter()

manage_orders = require_permission("manage:orders")


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
def create_order(
    data: CreateOrderRequest,
    _: TokenUser = Depends(manage_orders),
    service: OrderService = Depends(get_order_service),
):
    """Create an order in RECEIVED status; stock is checked but not taken"""
    return Order.from_model(service.create(data.client_id, data.items))


@router.get("", response_model=List[Order])
def get_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status", description="Filter by order status"),
    _: TokenUser = Depends(manage_orders),
    service: OrderService = Depends(get_order_service),
):
    return [Order.from_model(o) for o in service.find_all(status=status_filter)]


@router.get("/mine", response_model=List[Order])
def get_my_orders(
    client: Client = Depends(require_client("view:orders")),
    service: OrderService = Depends(get_order_service),
):
    """Orders placed by the authenticated client"""
    return [Order.from_model(o) for o in service.find_for_client(client.id)]


@router.get("/{order_id}", response_model=Order)
def get_order(
    order_id: int,
    _: TokenUser = Depends(manage_orders),
    service: OrderService = Depends(get_order_service),
):
    return Order.from_model(service.find_one(order_id))


@router.post("/{order_id}/payment", response_model=Order)
def confirm_payment(
    order_id: int,
    data: PaymentConfirmationRequest,
    _: TokenUser = Depends(manage_orders),
    service: OrderService = Depends(get_order_service),
    cache: TTLCache = Depends(get_cache),
):
    """Apply a payment result: CONFIRMED takes stock, DECLINED cancels"""
    order = Order.from_model(service.confirm_payment(order_id, data.status))
    cache.invalidate(CACHE_NAMESPACE)
    return order


@router.patch("/{order_id}/status", response_model=Order)
def update_order_status(
    order_id: int,
    data: OrderStatusUpdateRequest,
    _: TokenUser = Depends(manage_orders),
    service: OrderService = Depends(get_order_service),
    cache: TTLCache = Depends(get_cache),
):
    order = Order.from_model(service.update_order_status(order_id, data.status))
    cache.invalidate(CACHE_NAMESPACE)
    return order


@router.post("/{order_id}/confirm", response_model=Order)
def confirm_order(
    order_id: int,
    _: TokenUser = Depends(manage_orders),
    service: OrderService = Depends(get_order_service),
    cache: TTLCache = Depends(get_cache),
):
    order = Order.from_model(service.confirm_order(order_id))
    cache.invalidate(CACHE_NAMESPACE)
    return order


@router.post("/{order_id}/dispatch", response_model=Order)
def dispatch_order(
    order_id: int,
    _: TokenUser = Depends(manage_orders),
    service: OrderService = Depends(get_order_service),
):
    return Order.from_model(service.dispatch_order(order_id))


@router.post("/{order_id}/deliver", response_model=Order)
def deliver_order(
    order_id: int,
    _: TokenUser = Depends(manage_orders),
    service: OrderService = Depends(get_order_service),
):
    return Order.from_model(service.deliver_order(order_id))


@router.post("/{order_id}/cancel", response_model=Order)
def cancel_order(
    order_id: int,
    _: TokenUser = Depends(manage_orders),
    service: OrderService = Depends(get_order_service),
    cache: TTLCache = Depends(get_cache),
):
    order = Order.from_model(service.cancel_order(order_id))
    cache.invalidate(CACHE_NAMESPACE)
    return order
