from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Inventory Tracker"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./inventory.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Security
    # ==============================
    API_KEYS: Optional[str] = None
    API_KEY_HEADER: str = "X-API-Key"
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = None
    JWT_ISSUER: Optional[str] = None
    JWT_REQUIRED: bool = False
    DEFAULT_USER_ID: str = "local"
    DASHBOARD_USERNAME: Optional[str] = None
    DASHBOARD_PASSWORD: Optional[str] = None
    DASHBOARD_PASSWORD_HASH: Optional[str] = None
    DASHBOARD_PASSWORD_SALT: Optional[str] = None
    DASHBOARD_PBKDF2_ROUNDS: int = 200_000
    DASHBOARD_SESSION_SECRET: Optional[str] = None
    DASHBOARD_SESSION_COOKIE: str = "inventory_session"

    # ==============================
    # Stock control
    # ==============================
    HISTORY_LIMIT: int = 5
    TOP_MOVED_LIMIT: int = 5
    CONSUMPTION_WINDOW_DAYS: int = 30
    CONSUMPTION_WARNING_PERCENT: float = 80.0
    CONSUMPTION_DANGER_PERCENT: float = 100.0

    # ==============================
    # Invoice extraction (Gemini)
    # ==============================
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    EXTRACTION_TIMEOUT_SECONDS: int = 60
    EXTRACTION_MAX_BYTES: int = 10 * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
