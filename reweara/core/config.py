# reweara/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Env vars (.env):
      - DATABASE_URL (defaults to a local SQLite file)
      - JWT_SECRET (HS256 signing secret shared with the auth provider)

    Checkout pricing:
      - TAX_RATE (GST, fraction of subtotal)
      - SHIPPING_FEE, FREE_SHIPPING_THRESHOLD
    """

    PROJECT_NAME: str = "ReWeara Storefront API"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str = "sqlite:///./reweara.db"

    # JWT verification (backend-side)
    JWT_SECRET: str = "change-me"
    JWT_ALG: str = "HS256"

    # Header carrying the guest cart identity
    SESSION_HEADER: str = "X-Session-Id"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    TAX_RATE: float = 0.18
    SHIPPING_FEE: float = 50.0
    FREE_SHIPPING_THRESHOLD: float = 500.0

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
