"""
Configuration management using Pydantic settings.
Handles database URL, JWT secrets, upload storage and CORS origins from environment variables.
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings
from typing import Optional, List
from functools import lru_cache
import os


DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "https://james-j-han.github.io",
    "https://loving-friendship-production.up.railway.app",
]


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application configuration
    app_name: str = "Estate Listing API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # Database configuration; built from the components below when not given
    database_url: Optional[str] = None

    postgres_db: str = "estate_listings"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432

    # JWT configuration
    jwt_secret_key: str = "your-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Photo upload configuration
    upload_dir: str = "./uploads"
    uploads_url_prefix: str = "/uploads"
    public_base_url: str = "http://localhost:3000"
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    allowed_file_types: List[str] = ["image/jpeg", "image/png", "image/webp", "image/gif"]
    upload_cache_max_age: int = 31536000
    delete_replaced_photos: bool = False

    # HTTP surface
    cors_origins: List[str] = DEFAULT_CORS_ORIGINS
    cors_methods: List[str] = ["GET", "POST", "PUT", "DELETE"]
    request_timeout_seconds: float = 30.0
    max_request_size: int = 12 * 1024 * 1024
    empty_listing_not_found: bool = True

    # Optional admin account seeded at startup
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 3000

    @model_validator(mode="after")
    def build_database_url(self):
        """Build database URL from components if not provided directly."""
        if not self.database_url:
            self.database_url = (
                f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
                f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
            )
        elif self.database_url.startswith("postgresql://"):
            # Ensure async driver is used
            self.database_url = self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return self

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret_key(cls, v):
        """Validate JWT secret key strength."""
        if not v:
            raise ValueError("JWT_SECRET_KEY is required")
        if len(v) < 32 and v != "your-secret-key-change-in-production":
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters long")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("public_base_url", "uploads_url_prefix")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @field_validator("upload_dir")
    @classmethod
    def create_upload_directory(cls, v):
        """Ensure the upload directory exists."""
        if v and not os.path.exists(v):
            os.makedirs(v, exist_ok=True)
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

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
