"""Application configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults for development. The same settings object feeds
both the backend and the extension runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========== Database ==========
    database_url: str = Field(
        default="sqlite+aiosqlite:///./smartreplies.db",
        description="Async SQLAlchemy connection string",
    )
    db_pool_size: int = Field(default=5, ge=1, le=20)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_timeout: int = Field(default=30, ge=5, le=120)
    db_echo: bool = Field(default=False, description="Echo SQL queries")

    # ========== Stripe ==========
    stripe_secret_key: str = Field(default="", description="Stripe secret API key")
    stripe_webhook_secret: str = Field(default="", description="Stripe webhook signing secret")
    stripe_price_id: str = Field(
        default="price_1QxNy2CBh2MQglAzrAOxvXnr",
        description="Price ID of the Pro subscription plan",
    )
    frontend_url: str = Field(default="https://your-frontend.com")

    # ========== Reply Generation ==========
    generation_provider: Literal["template", "gemini", "openai"] = "template"
    gemini_api_key: str = Field(default="", description="Google Gemini API Key")
    openai_api_key: str = Field(default="", description="OpenAI API Key")
    gemini_model: str = "gemini-2.5-flash"
    openai_model: str = "gpt-4o-mini"

    # ========== Extension Runtime ==========
    backend_url: str = Field(default="https://stripe-backend.onrender.com")
    user_id: str = Field(default="guest", description="Identifier sent with checkout requests")
    free_daily_limit: int = Field(default=10, ge=0)
    reply_cache_ttl_seconds: float = Field(default=60.0, gt=0)
    reply_retries: int = Field(default=2, ge=0, le=5)
    reply_retry_delay_seconds: float = Field(default=1.0, ge=0)
    rescan_delay_seconds: float = Field(default=1.0, ge=0)
    request_timeout_seconds: float = Field(default=15.0, gt=0)
    storage_path: str = Field(default="", description="JSON file for local state; empty keeps it in memory")

    # ========== CORS ==========
    cors_origins_str: str = Field(
        default="*",
        alias="CORS_ORIGINS",
        description="Comma-separated CORS origins",
    )

    # ========== Application ==========
    app_name: str = "AI Smart Replies"
    app_version: str = "1.0.0"
    debug: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # ========== Computed Properties ==========
    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @computed_field
    @property
    def stripe_configured(self) -> bool:
        """Check if Stripe credentials are configured."""
        return bool(self.stripe_secret_key)

    @computed_field
    @property
    def checkout_success_url(self) -> str:
        return f"{self.frontend_url.rstrip('/')}/success?session_id={{CHECKOUT_SESSION_ID}}"

    @computed_field
    @property
    def checkout_cancel_url(self) -> str:
        return f"{self.frontend_url.rstrip('/')}/cancel"

    @computed_field
    @property
    def processed_database_url(self) -> str:
        """Convert database URL for asyncpg compatibility."""
        url = self.database_url
        if url.startswith("postgres://"):
            url = "postgresql+asyncpg://" + url[len("postgres://"):]
        elif url.startswith("postgresql://"):
            url = "postgresql+asyncpg://" + url[len("postgresql://"):]
        # libpq uses sslmode, asyncpg uses ssl
        replacements = [
            ("sslmode=require", "ssl=require"),
            ("sslmode=prefer", "ssl=prefer"),
            ("sslmode=verify-full", "ssl=verify-full"),
        ]
        for old, new in replacements:
            url = url.replace(old, new)
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
