"""
Category API endpoints
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.core.auth import TokenUser, require_permission
from storefront.core.database import get_db
from storefront.domain.product import CategoryCreate, CategoryResponse
from storefront.services.product_service import CategoryService

router = APIRouter()


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryCreate,
    _: TokenUser = Depends(require_permission("manage:categories")),
    service: CategoryService = Depends(get_category_service),
):
    return CategoryResponse.model_validate(service.create(data))


@router.get("", response_model=List[CategoryResponse])
def list_categories(
    _: TokenUser = Depends(require_permission("read:product")),
    service: CategoryService = Depends(get_category_service),
):
    return [CategoryResponse.model_validate(c) for c in service.find_all()]
