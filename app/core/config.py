# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "your-super-secret-jwt-key-change-this-in-production"


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required in production (.env):
      - JWT_SECRET (token signing secret)
      - DATABASE_URL (Postgres connection string)

    Optional:
      - STRIPE_SECRET_KEY (payment endpoints answer 502 without it)
      - BOOTSTRAP_ADMIN_EMAIL / BOOTSTRAP_ADMIN_PASSWORD (first admin account)
    """

    PROJECT_NAME: str = "Course Marketplace API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # development | production | test
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./course_marketplace.db"
    DB_SSLMODE: str | None = None
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 0
    DB_ECHO: bool = False

    # Token signing
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALG: str = "HS256"
    JWT_EXPIRES_HOURS: int = 24

    # Comma separated list; "*" allows every origin
    CORS_ORIGINS: str = "*"

    # Sliding window, per client address
    RATE_LIMIT_WINDOW_MS: int = 900_000
    RATE_LIMIT_MAX_REQUESTS: int = 100

    # Stripe
    STRIPE_SECRET_KEY: str | None = None
    STRIPE_API_VERSION: str = "2020-08-27"

    # First admin account, created at startup when no admin exists
    BOOTSTRAP_ADMIN_EMAIL: str | None = None
    BOOTSTRAP_ADMIN_PASSWORD: str | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() == "development"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def validate_runtime(self) -> None:
        """Refuse to boot a production process with the default signing secret."""
        if self.APP_ENV.lower() == "production" and self.JWT_SECRET == DEFAULT_JWT_SECRET:
            raise RuntimeError("JWT_SECRET must be set in production.")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
