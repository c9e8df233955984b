"""
Application configuration using pydantic-settings.
All config is loaded from environment variables once at startup.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

from moviepay.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Movie Ticket Checkout API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Front-end origin used for CORS and checkout redirect targets
    FRONTEND_URL: str = "https://movie-booking-rho-coral.vercel.app"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Database
    DATABASE_URL: str = ""
    DATABASE_URL_SYNC: str = ""
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 minutes
    DB_CONNECT_MAX_RETRIES: int = 10
    DB_CONNECT_RETRY_DELAY: float = 1.5
    STORE_TIMEOUT_SECONDS: float = 5.0

    # Stripe
    STRIPE_SECRET_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""
    STRIPE_USE_STUB: bool = False
    STRIPE_STUB_CHECKOUT_URL: str = "https://checkout.stripe.com/c/pay"
    GATEWAY_TIMEOUT_SECONDS: float = 10.0

    # Checkout
    CURRENCY: str = "inr"
    DEFAULT_MOVIE_TITLE: str = "Movie Ticket"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }

    @property
    def frontend_origin(self) -> str:
        return self.FRONTEND_URL.rstrip("/")

    @property
    def allowed_origins(self) -> list[str]:
        return [self.frontend_origin, *self.CORS_ORIGINS]

    @property
    def sync_database_url(self) -> str:
        """URL for Alembic, which runs with a blocking driver."""
        if self.DATABASE_URL_SYNC:
            return self.DATABASE_URL_SYNC
        return self.DATABASE_URL.replace("+asyncpg", "").replace("+aiosqlite", "")

    def missing_required(self) -> list[str]:
        missing = []
        if not self.DATABASE_URL:
            missing.append("DATABASE_URL")
        if not self.STRIPE_USE_STUB and not self.STRIPE_SECRET_KEY:
            missing.append("STRIPE_SECRET_KEY")
        return missing

    def ensure_configured(self) -> None:
        """Refuse to start without a store connection or gateway credential."""
        missing = self.missing_required()
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
