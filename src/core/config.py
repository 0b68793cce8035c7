"""
Application configuration using Pydantic Settings.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import field_validator


# List of known insecure default secrets that should never be used
INSECURE_DEFAULTS = {
    "your-super-secret-key-change-in-production",
    "secret",
    "changeme",
    "test",
    "dev",
    "development",
    "password",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Restaurant POS API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./restaurant_pos.db"
    SQLITE_BUSY_TIMEOUT: float = 30.0  # seconds a writer waits for the database lock

    # JWT Configuration
    JWT_SECRET_KEY: str = "your-super-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 720  # one till shift

    # Human-readable identifiers printed on tickets and bills
    ORDER_NUMBER_PREFIX: str = "OD-"
    ORDER_NUMBER_WIDTH: int = 3
    BILL_NUMBER_PREFIX: str = "INV-"
    BILL_NUMBER_WIDTH: int = 4

    # Inventory
    DEFAULT_LOW_STOCK_THRESHOLD: int = 10

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """
        Validate JWT secret key is secure.

        Requirements:
        - At least 32 characters
        - Not a known insecure default
        """
        if v.lower() in INSECURE_DEFAULTS:
            raise ValueError(
                f"JWT_SECRET_KEY is set to an insecure default value. "
                f"Please set a strong secret key via environment variable. "
                f"Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
            )

        if len(v) < 32:
            raise ValueError(
                f"JWT_SECRET_KEY must be at least 32 characters long (got {len(v)}). "
                f"Generate a secure key with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
            )

        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
