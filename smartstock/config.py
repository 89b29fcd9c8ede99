from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "SmartStock Pro"
    ENVIRONMENT: str = "local"

    # ==============================
    # Persistence
    # ==============================
    DATABASE_URL: str = "sqlite:///./smartstock.db"
    IMPORT_DIR: str = "./imports"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Product defaults
    # ==============================
    DEFAULT_MIN_STOCK: int = 10
    DEFAULT_MONTHLY_NEED: int = 10
    DEFAULT_CURRENCY: str = "$"
    DEFAULT_UNIT: str = "unités"
    DEFAULT_RESPONSIBLE: str = "Admin"
    LOG_OPENING_BALANCE: bool = True

    # ==============================
    # AI payloads
    # ==============================
    AI_HISTORY_WINDOW: int = 10
    AI_REPORT_WINDOW: int = 30


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
