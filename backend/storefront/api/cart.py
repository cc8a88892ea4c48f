"""
Cart API endpoints
All routes act on the authenticated client's own cart (manage:cart)
"""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_current_client
from storefront.core.database import get_db
from storefront.domain.cart import AddToCartRequest, CartCleared, CartItem, CartTotal, UpdateCartItemRequest
from storefront.domain.order import Order
from storefront.models.user import Client
from storefront.services.cart_service import CartService

router = APIRouter()


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


@router.get("", response_model=List[CartItem])
def get_cart(
    client: Client = Depends(get_current_client),
    service: CartService = Depends(get_cart_service),
):
    return [CartItem.model_validate(item) for item in service.get_cart(client.id)]


@router.get("/total", response_model=CartTotal)
def get_cart_total(
    client: Client = Depends(get_current_client),
    service: CartService = Depends(get_cart_service),
):
    items = service.get_cart(client.id)
    return CartTotal(total=service.get_cart_total(client.id), item_count=len(items))


@router.post("", response_model=CartItem, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    data: AddToCartRequest,
    client: Client = Depends(get_current_client),
    service: CartService = Depends(get_cart_service),
):
    """Add a product, or raise the quantity of an existing line"""
    return CartItem.model_validate(service.add_to_cart(client.id, data.product_id, data.quantity))


@router.post("/checkout", response_model=Order, status_code=status.HTTP_201_CREATED)
def checkout(
    client: Client = Depends(get_current_client),
    service: CartService = Depends(get_cart_service),
):
    """Place an order with the whole cart and empty it"""
    return Order.from_model(service.checkout(client.id))


@router.put("/{item_id}", response_model=CartItem)
def update_cart_item(
    item_id: int,
    data: UpdateCartItemRequest,
    client: Client = Depends(get_current_client),
    service: CartService = Depends(get_cart_service),
):
    return CartItem.model_validate(service.update_cart_item(client.id, item_id, data.quantity))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_cart(
    item_id: int,
    client: Client = Depends(get_current_client),
    service: CartService = Depends(get_cart_service),
):
    service.remove_from_cart(client.id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", response_model=CartCleared)
def clear_cart(
    client: Client = Depends(get_current_client),
    service: CartService = Depends(get_cart_service),
):
    return CartCleared(removed=service.clear_cart(client.id))
