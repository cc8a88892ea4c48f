"""
Authentication API endpoints
- Registration and email verification
- Login / refresh / logout with bearer tokens
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_settings
from storefront.core.auth import TokenUser, get_current_user
from storefront.core.config import Settings
from storefront.core.database import get_db
from storefront.core.rate_limit import login_rate_limit
from storefront.domain.auth import (
    EmailVerificationRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResendVerificationRequest,
    TokenPair,
)
from storefront.domain.common import MessageResponse
from storefront.domain.user import User
from storefront.services.auth_service import AuthService
from storefront.services.user_service import UserService

router = APIRouter()


def get_auth_service(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, settings, request.app.state.email_service)


def get_user_service(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, settings, request.app.state.email_service)


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    """Create a CLIENT account and send the verification email"""
    user = service.register(
        email=data.email,
        password=data.password,
        name=data.name,
        contact=data.contact,
        address=data.address,
    )
    return User.model_validate(user)


@router.post("/login", response_model=TokenPair, dependencies=[Depends(login_rate_limit)])
def login(data: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Exchange email and password for an access/refresh token pair"""
    user = service.authenticate(data.email, data.password)
    return service.login(user)


@router.post("/refresh", response_model=TokenPair)
def refresh(data: RefreshRequest, service: AuthService = Depends(get_auth_service)):
    return service.refresh(data.refresh_token)


@router.post("/logout", response_model=MessageResponse)
def logout(
    user: TokenUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    service.logout(user.id)
    return MessageResponse(message="Logged out")


@router.get("/profile", response_model=TokenUser)
async def profile(user: TokenUser = Depends(get_current_user)):
    """Current user as read from the access token"""
    return user


@router.post("/verify-email", response_model=MessageResponse)
def verify_email(data: EmailVerificationRequest, service: UserService = Depends(get_user_service)):
    service.verify_email(data.token)
    return MessageResponse(message="Email verified successfully")


@router.post("/resend-verification", response_model=MessageResponse)
def resend_verification(data: ResendVerificationRequest, service: UserService = Depends(get_user_service)):
    return MessageResponse(message=service.resend_verification(data.email))
