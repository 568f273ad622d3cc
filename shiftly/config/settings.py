from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # ── Application ──────────────────────────────────────────────
    app_name: str = "Shiftly Workforce API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    api_version: str = "v1"

    # ── Database ─────────────────────────────────────────────────
    mongodb_uri: Optional[str] = "mongodb://localhost:27017"
    database_name: str = "shiftly_db"
    seed_catalog_on_startup: bool = True

    # ── JWT / Security ───────────────────────────────────────────
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # ── CORS ─────────────────────────────────────────────────────
    cors_allowed_origins: list[str] = [
        "http://localhost:4200",
        "http://localhost:3000",
        "http://127.0.0.1:4200",
    ]
    cors_allow_credentials: bool = True
    cors_allowed_methods: list[str] = ["*"]
    cors_allowed_headers: list[str] = ["*"]

    class Config:
        env_file = ".env.local"
        extra = "ignore"


# ── Module-level singleton ──────────────────────────────────────
settings = Settings()
