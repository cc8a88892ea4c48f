"""
Shared FastAPI dependencies for the API routers
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from storefront.core.auth import TokenUser, require_permission
from storefront.core.cache import TTLCache
from storefront.core.config import Settings
from storefront.core.database import get_db
from storefront.core.errors import ForbiddenError
from storefront.models.user import Client
from storefront.repositories.user_repository import UserRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> TTLCache:
    return request.app.state.cache


def require_client(permission: str):
    """
    Dependency factory returning the authenticated user's client profile

    Raises:
        ForbiddenError: the user lacks ``permission`` or has no client profile (e.g. an admin)
    """
    def client_loader(
        user: TokenUser = Depends(require_permission(permission)),
        db: Session = Depends(get_db),
    ) -> Client:
        client = UserRepository(db).find_client_by_user_id(user.id)
        if client is None:
            raise ForbiddenError("A client profile is required for this operation")
        return client

    return client_loader


get_current_client = require_client("manage:cart")
