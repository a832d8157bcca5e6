"""
Configuration module - Central access point for environment variables.

CRITICAL: Access ALL environment variables through this module.
NEVER use os.getenv() directly in application code.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Stripe
    STRIPE_SECRET_KEY: str = Field(
        default="sk_test_placeholder",
        description="Stripe secret key used to create Checkout Sessions",
    )
    MEETING_PRICE_CENTS: int = Field(
        default=30000,
        description="Price charged per meeting, in the smallest currency unit",
    )
    MEETING_CURRENCY: str = Field(default="usd")
    MEETING_PRODUCT_NAME: str = Field(default="Meeting")

    # Nylas
    NYLAS_ACCESS_TOKEN: str = Field(
        default="nylas-placeholder",
        description="Bearer token for the Nylas event cancellation endpoint",
    )
    NYLAS_API_URL: str = Field(default="https://api.nylas.com")
    SCHEDULER_BASE_URL: str = Field(
        default="https://schedule.nylas.com",
        description="Base URL of scheduler pages (US region only)",
    )

    # Accept utility (headless browser that confirms bookings for the organizer)
    ACCEPT_SERVICE_URL: str = Field(default="http://localhost:3000/accept")

    BOOKING_REQUEST_TIMEOUT: float = Field(
        default=60.0,
        description="Timeout in seconds for confirm/cancel calls",
    )

    # Application Settings
    APP_BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Public URL of this service, used for payment redirects",
    )
    LOG_LEVEL: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()
