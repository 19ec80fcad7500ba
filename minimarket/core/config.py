# minimarket/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Every field has a development default so the API boots without a .env.
    For anything public-facing, override at least:
      - DATABASE_URL (e.g. a Postgres connection string)
      - JWT_SECRET (signing secret for access tokens)

    Optional:
      - CART_SLOT_DIR (where durable cart snapshots are written)
      - CORS_ORIGINS (JSON list of allowed frontend origins)
    """

    PROJECT_NAME: str = "Hami MiniMarket API"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Document store / DB config
    DATABASE_URL: str = "sqlite:///./minimarket.db"

    # JWT issuance + verification (backend-side)
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Durable cart slot (best-effort, one JSON file per shopper)
    CART_SLOT_DIR: str = ".carts"
    CART_STORAGE_KEY: str = "hami-minimarket-cart"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
