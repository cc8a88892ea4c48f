"""
Domain exceptions

Raised by the service layer when a business rule is violated. The API
layer does not catch them one by one: ``register_exception_handlers``
installs a single handler that turns them into JSON error responses with
the same shape FastAPI uses for ``HTTPException``.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    """Base class for errors surfaced to API clients"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(StorefrontError):
    """A referenced entity does not exist"""

    status_code = status.HTTP_404_NOT_FOUND


class BadRequestError(StorefrontError):
    """Insufficient stock, invalid status transition or invalid input"""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(StorefrontError):
    """Missing, invalid or expired credentials"""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(StorefrontError):
    """Authenticated, but lacking the required role or permission"""

    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(StorefrontError):
    """Unique constraint violation, e.g. duplicate email on registration"""

    status_code = status.HTTP_409_CONFLICT


class StorageError(StorefrontError):
    """Blob storage upload or URL signing failed"""

    status_code = status.HTTP_502_BAD_GATEWAY


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(StorefrontError, storefront_error_handler)
