"""Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env file.
Provider keys default to empty strings; an empty key switches the
matching data category to its fallback path instead of failing.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, PostgresDsn, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ============ Application Settings ============
    APP_NAME: str = "Planera"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: Literal["development", "staging", "production", "test"] = "development"

    # ============ Server Settings ============
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    WORKERS: int = 1

    # ============ Security Settings ============
    SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="Secret key for API token signing",
    )
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60,
        description="Access token expiration time in minutes",
    )
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(
        default=30,
        description="Refresh token expiration time in days",
    )

    # ============ CORS Settings ============
    CORS_ORIGINS: list[str] = Field(
        default=["http://localhost:8081", "http://localhost:19006"],
        description="Allowed CORS origins (Expo dev servers)",
    )

    # ============ Database Settings ============
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "planera"
    POSTGRES_PASSWORD: str = "planera_password"
    POSTGRES_DB: str = "planera_db"
    DATABASE_URL_OVERRIDE: str = Field(
        default="",
        description="Full async SQLAlchemy URL; takes precedence over POSTGRES_*",
    )
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    @computed_field  # type: ignore[misc]
    @property
    def DATABASE_URL(self) -> str:
        """Construct the async database connection URL."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return str(
            PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD,
                host=self.POSTGRES_HOST,
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,
            )
        )

    # ============ Redis / Celery Settings ============
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str | None = None
    CELERY_BROKER_DB: int = 1
    CELERY_RESULT_DB: int = 2

    def _redis_url(self, db: int) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{db}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{db}"

    @computed_field  # type: ignore[misc]
    @property
    def CELERY_BROKER_URL(self) -> str:
        """Construct Celery broker URL (Redis)."""
        return self._redis_url(self.CELERY_BROKER_DB)

    @computed_field  # type: ignore[misc]
    @property
    def CELERY_RESULT_BACKEND(self) -> str:
        """Construct Celery result backend URL (Redis)."""
        return self._redis_url(self.CELERY_RESULT_DB)

    # ============ Amadeus API Settings ============
    AMADEUS_CLIENT_ID: str = Field(
        default="",
        description="Amadeus API Client ID",
    )
    AMADEUS_CLIENT_SECRET: str = Field(
        default="",
        description="Amadeus API Client Secret",
    )
    AMADEUS_BASE_URL: str = Field(
        default="https://test.api.amadeus.com",
        description="Amadeus API Base URL (use production URL in prod)",
    )

    # ============ Duffel API Settings ============
    DUFFEL_ACCESS_TOKEN: str = Field(
        default="",
        description="Duffel bearer token (duffel_test_* or duffel_live_*)",
    )
    DUFFEL_ENV: Literal["test", "live"] = Field(
        default="test",
        description="Which Duffel environment the token belongs to",
    )
    DUFFEL_BASE_URL: str = "https://api.duffel.com"

    # ============ TripAdvisor API Settings ============
    TRIPADVISOR_API_KEY: str = Field(
        default="",
        description="TripAdvisor Content API key",
    )
    TRIPADVISOR_BASE_URL: str = "https://api.content.tripadvisor.com/api/v1"

    # ============ Unsplash API Settings ============
    UNSPLASH_ACCESS_KEY: str = Field(
        default="",
        description="Unsplash access key for destination photos",
    )
    UNSPLASH_BASE_URL: str = "https://api.unsplash.com"

    # ============ OpenAI Settings ============
    OPENAI_API_KEY: str = Field(
        default="",
        description="OpenAI API Key for itinerary generation",
    )
    OPENAI_MODEL: str = Field(
        default="gpt-4o",
        description="OpenAI model to use",
    )
    ASSISTANT_MAX_TOKENS: int = Field(
        default=500,
        description="Reply length cap for the travel assistant",
    )

    # ============ Gmail Settings ============
    GMAIL_CLIENT_ID: str = ""
    GMAIL_CLIENT_SECRET: str = ""
    GMAIL_REFRESH_TOKEN: str = ""
    GMAIL_SENDER: str = "support@planeraai.app"
    # Legacy names, used when the GMAIL_* variants are unset
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REFRESH_TOKEN: str = ""

    # ============ Native Sign-In Settings ============
    GOOGLE_WEB_CLIENT_ID: str = Field(
        default="",
        description="Expected audience of Google ID tokens",
    )
    APPLE_BUNDLE_ID: str = Field(
        default="",
        description="Expected audience of Apple identity tokens",
    )

    # ============ Trip Settings ============
    DEFAULT_ORIGIN: str = Field(
        default="Athens",
        description="Origin used when a trip has none",
    )
    FREE_PLAN_TRIP_LIMIT: int = 3

    # ============ Public URLs ============
    SITE_URL: str = "https://planera.app"
    CHECKOUT_BASE_URL: str = "https://checkout.planera.app/cart"

    # ============ Logging Settings ============
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["text", "json"] = "text"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
