"""
Centralized application configuration
"""
import json
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, read from the environment and .env"""

    # API Settings
    API_TITLE: str = "Storefront API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Catalog, cart, orders and sales reports"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./storefront.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    AUTO_CREATE_TABLES: bool = True

    # Auth
    JWT_SECRET: str = "change-me"
    JWT_REFRESH_SECRET: str = "change-me-too"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    EMAIL_VERIFY_TOKEN_HOURS: int = 24

    # Rate limiting for the login endpoint
    LOGIN_RATE_LIMIT: int = 5
    LOGIN_RATE_WINDOW_SECONDS: int = 15 * 60

    # Product response cache
    CACHE_TTL_SECONDS: int = 300

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    # SMTP (verification emails). Empty host disables sending.
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM: str = "no-reply@storefront.local"
    SMTP_USE_TLS: bool = True
    FRONTEND_URL: str = "http://localhost:3000"

    # Blob storage for reports (Supabase Storage). Empty URL disables uploads.
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    STORAGE_BUCKET: str = "reports"
    SIGNED_URL_EXPIRES_SECONDS: int = 3600

    # Local directory for generated report files
    REPORTS_DIR: str = "reports"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def smtp_enabled(self) -> bool:
        return bool(self.SMTP_HOST)

    @property
    def storage_enabled(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_ROLE_KEY)

    class Config:
        env_file = ".env"
        case_sensitive = True


def get_settings() -> Settings:
    """Build settings from the current environment"""
    return Settings()
