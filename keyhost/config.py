"""
Configuration management using Pydantic settings.
Handles database connection parameters, JWT secrets, and platform limits from
environment variables or a local .env file.
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings
from typing import Optional, List
from functools import lru_cache
from urllib.parse import quote_plus


DEFAULT_JWT_SECRET = "keyhost-dev-access-secret-change-in-production"
DEFAULT_JWT_REFRESH_SECRET = "keyhost-dev-refresh-secret-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from DB_*, JWT_* and related variables."""

    # Application configuration
    app_name: str = "Keyhost Booking API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # Database configuration (DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME)
    db_driver: str = "postgresql+asyncpg"
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "keyhost_booking_system"

    # Full URL wins over the individual components when provided
    database_url: Optional[str] = None

    # JWT configuration
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_refresh_secret: str = DEFAULT_JWT_REFRESH_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    refresh_token_expire_days: int = 7

    # Account lockout
    max_login_attempts: int = 5
    lockout_minutes: int = 30

    # Booking pricing
    service_fee_rate: float = 0.10
    tax_rate: float = 0.15

    # Inline image limits
    max_image_bytes: int = 5 * 1024 * 1024  # 5MB
    max_images_per_property: int = 10
    allowed_image_types: List[str] = ["image/jpeg", "image/jpg", "image/png", "image/webp"]

    # API configuration
    api_prefix: str = "/api"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Pagination defaults
    default_page_size: int = 12
    max_page_size: int = 100

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 5000

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure an async driver is used for PostgreSQL URLs."""
        if v and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        return v or None

    @model_validator(mode="after")
    def build_database_url(self):
        """Build database URL from the DB_* components if not provided directly."""
        if not self.database_url:
            credentials = quote_plus(self.db_user)
            if self.db_password:
                credentials += f":{quote_plus(self.db_password)}"
            self.database_url = (
                f"{self.db_driver}://{credentials}@{self.db_host}:{self.db_port}/{self.db_name}"
            )
        return self

    @model_validator(mode="after")
    def validate_jwt_secrets(self):
        """Refuse weak or default JWT secrets in production."""
        if not self.jwt_secret or not self.jwt_refresh_secret:
            raise ValueError("JWT_SECRET and JWT_REFRESH_SECRET are required")
        if self.environment == "production":
            for name, value, default in (
                ("JWT_SECRET", self.jwt_secret, DEFAULT_JWT_SECRET),
                ("JWT_REFRESH_SECRET", self.jwt_refresh_secret, DEFAULT_JWT_REFRESH_SECRET),
            ):
                if value == default or len(value) < 32:
                    raise ValueError(f"{name} must be set to at least 32 characters in production")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the app lifecycle.
    """
    return Settings()


# Global settings instance
settings = get_settings()
