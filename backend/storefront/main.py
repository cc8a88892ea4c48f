"""
Storefront - Backend API
Catalog, cart, orders and sales reports
"""
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

# Load environment variables
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

from storefront.api import auth, cart, categories, clients, orders, products, reports, storage, users  # noqa: E402
from storefront.core import metrics  # noqa: E402
from storefront.core.cache import TTLCache  # noqa: E402
from storefront.core.config import Settings, get_settings  # noqa: E402
from storefront.core.database import Database  # noqa: E402
from storefront.core.errors import register_exception_handlers  # noqa: E402
from storefront.core.logging_config import RequestLoggingMiddleware, setup_logging  # noqa: E402
from storefront.core.rate_limit import RateLimiter  # noqa: E402
from storefront.services.email_service import EmailService  # noqa: E402
from storefront.services.storage_service import StorageService  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database: Database = app.state.database

    if settings.AUTO_CREATE_TABLES:
        database.create_all()
        logger.info("Database tables ensured")

    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} started")
    yield
    database.dispose()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    email_service: Optional[EmailService] = None,
    storage_service: Optional[StorageService] = None,
) -> FastAPI:
    """
    Build the FastAPI application

    Every collaborator can be passed in explicitly; anything omitted is
    built from ``settings``.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        description=settings.API_DESCRIPTION,
        debug=settings.API_DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database or Database(
        settings.DATABASE_URL,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
    )
    app.state.cache = TTLCache(ttl=settings.CACHE_TTL_SECONDS)
    app.state.rate_limiter = RateLimiter()
    app.state.email_service = email_service or EmailService(settings)
    app.state.storage_service = storage_service or StorageService(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Cache"],
    )
    app.add_middleware(metrics.MetricsMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    # Include API routers
    app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
    app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
    app.include_router(clients.router, prefix="/api/v1/clients", tags=["Clients"])
    app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
    app.include_router(categories.router, prefix="/api/v1/categories", tags=["Categories"])
    app.include_router(cart.router, prefix="/api/v1/cart", tags=["Cart"])
    app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
    app.include_router(reports.router, prefix="/api/v1/reports", tags=["Reports"])
    app.include_router(storage.router, prefix="/api/v1/storage", tags=["Storage"])
    app.include_router(metrics.router)

    @app.get("/")
    async def root():
        """Root endpoint - API status"""
        return {
            "message": "Storefront API",
            "status": "online",
            "version": settings.API_VERSION,
            "description": settings.API_DESCRIPTION,
        }

    @app.get("/health")
    def health(request: Request):
        """Health check endpoint for monitoring - tests database connectivity"""
        start_time = time.time()

        db_status = "unknown"
        db_latency_ms = None
        db_error = None

        try:
            # Minimal retry for a fast check
            db_latency_ms = request.app.state.database.ping(max_retries=1)
            db_status = "connected"
        except SQLAlchemyError as e:
            db_status = "disconnected"
            db_error = str(e)

        total_latency_ms = round((time.time() - start_time) * 1000, 2)

        return {
            "status": "healthy" if db_status == "connected" else "degraded",
            "service": "storefront-api",
            "version": settings.API_VERSION,
            "database": {
                "status": db_status,
                "latency_ms": db_latency_ms,
                "error": db_error,
            },
            "total_latency_ms": total_latency_ms,
        }

    return app


app = create_app()
