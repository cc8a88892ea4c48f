"""
User management API endpoints
- Account administration (manage:users)
- Profile updates for the current user
"""
from typing import List

from fastapi import APIRouter, Depends, Response, status

from storefront.api.auth import get_auth_service, get_user_service
from storefront.core.auth import TokenUser, get_current_user, require_permission
from storefront.domain.user import Client, Profile, ProfileUpdate, User, UserCreate, UserUpdate
from storefront.services.auth_service import AuthService
from storefront.services.user_service import UserService

router = APIRouter()

manage_users = require_permission("manage:users")


def to_profile(user) -> Profile:
    return Profile(
        user=User.model_validate(user),
        client=Client.model_validate(user.client) if user.client is not None else None,
    )


@router.patch("/me", response_model=Profile)
def update_my_profile(
    data: ProfileUpdate,
    user: TokenUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Update the caller's name and contact details"""
    return to_profile(service.update_profile(user.id, data))


@router.get("/me", response_model=Profile)
def get_my_profile(
    user: TokenUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return to_profile(service.find_one(user.id))


@router.get("", response_model=List[User])
def list_users(
    _: TokenUser = Depends(manage_users),
    service: UserService = Depends(get_user_service),
):
    return [User.model_validate(u) for u in service.find_all()]


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    _: TokenUser = Depends(manage_users),
    service: AuthService = Depends(get_auth_service),
):
    """Create an account of any type; CLIENT accounts get a client profile"""
    user = service.register(
        email=data.email,
        password=data.password,
        name=data.name,
        user_type=data.type,
        contact=data.contact,
        address=data.address,
    )
    return User.model_validate(user)


@router.get("/{user_id}", response_model=Profile)
def get_user(
    user_id: int,
    _: TokenUser = Depends(manage_users),
    service: UserService = Depends(get_user_service),
):
    return to_profile(service.find_one(user_id))


@router.patch("/{user_id}", response_model=User)
def update_user(
    user_id: int,
    data: UserUpdate,
    _: TokenUser = Depends(manage_users),
    service: UserService = Depends(get_user_service),
):
    return User.model_validate(service.update(user_id, data))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    _: TokenUser = Depends(manage_users),
    service: UserService = Depends(get_user_service),
):
    service.remove(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
