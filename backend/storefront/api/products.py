"""
Products API Endpoints
Handles product catalog management and queries

List and detail responses are served from the app's TTL cache; every
product mutation drops the whole ``products`` namespace.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_cache
from storefront.core.auth import TokenUser, require_permission
from storefront.core.cache import TTLCache, make_key
from storefront.core.database import get_db
from storefront.domain.product import Product, ProductCreate, ProductList, ProductUpdate
from storefront.services.product_service import ProductService

router = APIRouter()

CACHE_NAMESPACE = "products"


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    return ProductService(db)


@router.get("", response_model=ProductList)
def get_products(
    response: Response,
    search: Optional[str] = Query(None, description="Search by name"),
    category_id: Optional[int] = Query(None, description="Filter by category"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    _: TokenUser = Depends(require_permission("read:product")),
    service: ProductService = Depends(get_product_service),
    cache: TTLCache = Depends(get_cache),
):
    """
    Get all products with optional filters

    Returns a page of products and the total match count
    """
    key = make_key(CACHE_NAMESPACE, "list", search or "", category_id, limit, offset)
    cached = cache.get(key)
    if cached is not None:
        response.headers["X-Cache"] = "HIT"
        return cached

    products, total = service.find_all(search=search, category_id=category_id, limit=limit, offset=offset)
    result = ProductList(
        total=total,
        limit=limit,
        offset=offset,
        data=[Product.model_validate(p) for p in products],
    ).model_dump(mode="json")

    cache.set(key, result)
    response.headers["X-Cache"] = "MISS"
    return result


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: int,
    response: Response,
    _: TokenUser = Depends(require_permission("read:product")),
    service: ProductService = Depends(get_product_service),
    cache: TTLCache = Depends(get_cache),
):
    key = make_key(CACHE_NAMESPACE, "detail", product_id)
    cached = cache.get(key)
    if cached is not None:
        response.headers["X-Cache"] = "HIT"
        return cached

    result = Product.model_validate(service.find_one(product_id)).model_dump(mode="json")
    cache.set(key, result)
    response.headers["X-Cache"] = "MISS"
    return result


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    _: TokenUser = Depends(require_permission("create:product")),
    service: ProductService = Depends(get_product_service),
    cache: TTLCache = Depends(get_cache),
):
    product = Product.model_validate(service.create(data))
    cache.invalidate(CACHE_NAMESPACE)
    return product


@router.patch("/{product_id}", response_model=Product)
def update_product(
    product_id: int,
    data: ProductUpdate,
    _: TokenUser = Depends(require_permission("update:product")),
    service: ProductService = Depends(get_product_service),
    cache: TTLCache = Depends(get_cache),
):
    product = Product.model_validate(service.update(product_id, data))
    cache.invalidate(CACHE_NAMESPACE)
    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    _: TokenUser = Depends(require_permission("delete:product")),
    service: ProductService = Depends(get_product_service),
    cache: TTLCache = Depends(get_cache),
):
    service.remove(product_id)
    cache.invalidate(CACHE_NAMESPACE)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
