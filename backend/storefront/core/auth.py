"""
Authentication and authorization for the Storefront backend

- bcrypt password hashing (passlib)
- HS256 JWT access/refresh tokens (python-jose)
- FastAPI dependencies for the current user, roles and permissions
"""
import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, FrozenSet, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from storefront.core.config import Settings
from storefront.core.errors import ForbiddenError, UnauthorizedError
from storefront.models.user import UserType

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

ALL_PERMISSIONS: FrozenSet[str] = frozenset({
    "create:product",
    "read:product",
    "update:product",
    "delete:product",
    "manage:categories",
    "manage:users",
    "manage:clients",
    "manage:orders",
    "view:orders",
    "manage:cart",
    "manage:reports",
})

ROLE_PERMISSIONS: Dict[UserType, FrozenSet[str]] = {
    UserType.ADMIN: ALL_PERMISSIONS,
    UserType.CLIENT: frozenset({"read:product", "view:orders", "manage:cart"}),
}


class TokenUser(BaseModel):
    """User data extracted from an access token"""
    id: int
    email: str
    name: Optional[str] = None
    role: UserType

    @property
    def permissions(self) -> FrozenSet[str]:
        return ROLE_PERMISSIONS.get(self.role, frozenset())

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def hash_token(token: str) -> str:
    """SHA-256 digest used to store refresh tokens"""
    return hashlib.sha256(token.encode()).hexdigest()


def _encode(claims: dict, secret: str, algorithm: str, expires_delta: timedelta, token_type: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "type": token_type,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def create_access_token(settings: Settings, user_id: int, email: str, role: str, name: Optional[str] = None) -> str:
    return _encode(
        {"sub": str(user_id), "email": email, "role": role, "name": name},
        settings.JWT_SECRET,
        settings.JWT_ALGORITHM,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        ACCESS_TOKEN,
    )


def create_refresh_token(settings: Settings, user_id: int) -> str:
    return _encode(
        {"sub": str(user_id)},
        settings.JWT_REFRESH_SECRET,
        settings.JWT_ALGORITHM,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        REFRESH_TOKEN,
    )


def decode_token(settings: Settings, token: str, token_type: str = ACCESS_TOKEN) -> dict:
    """
    Decode and validate a token of the given type.

    Raises:
        UnauthorizedError: expired, malformed, wrongly signed or of the wrong type
    """
    secret = settings.JWT_SECRET if token_type == ACCESS_TOKEN else settings.JWT_REFRESH_SECRET
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except JWTError as e:
        raise UnauthorizedError(f"Invalid token: {e}")

    if payload.get("type") != token_type or not payload.get("sub"):
        raise UnauthorizedError("Invalid token payload")
    return payload


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenUser:
    """
    Dependency that extracts and validates the current user from the bearer token.

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    if not credentials:
        raise UnauthorizedError("Authentication required")

    payload = decode_token(request.app.state.settings, credentials.credentials, ACCESS_TOKEN)

    try:
        return TokenUser(
            id=int(payload["sub"]),
            email=payload.get("email", ""),
            name=payload.get("name"),
            role=UserType(payload.get("role")),
        )
    except ValueError:
        raise UnauthorizedError("Invalid token payload")


def require_role(*roles: UserType):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/cart")
        async def get_cart(user: TokenUser = Depends(require_role(UserType.CLIENT))):
            ...
    """
    async def role_checker(user: TokenUser = Depends(get_current_user)) -> TokenUser:
        if user.role not in roles:
            allowed = ", ".join(r.value for r in roles)
            raise ForbiddenError(f"Access denied. Required role: {allowed}, your role: {user.role.value}")
        return user

    return role_checker


def require_permission(*permissions: str):
    """
    Dependency factory for capability checks.

    The user must hold every listed permission through their role.

    Usage:
        @router.post("/products")
        async def create_product(user: TokenUser = Depends(require_permission("create:product"))):
            ...
    """
    async def permission_checker(user: TokenUser = Depends(get_current_user)) -> TokenUser:
        missing = [p for p in permissions if not user.has_permission(p)]
        if missing:
            raise ForbiddenError(f"Access denied. Missing permission: {', '.join(missing)}")
        return user

    return permission_checker


require_admin = require_role(UserType.ADMIN)
