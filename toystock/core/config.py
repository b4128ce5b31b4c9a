"""Application configuration loaded via pydantic settings."""

from typing import List
import secrets

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Strongly-typed application settings with environment overrides."""

    # Application
    APP_NAME: str = "Prime Toys Stock Tracker"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Security (tokens are issued by the external identity provider)
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Database
    DATABASE_URL: str = "sqlite:///./toystock/toystock.db"
    SEED_DEMO_DATA: bool = False

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:8000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_LEVELS: str = "TRACE,ERROR,WARNING,INFO"
    LOG_FILE_PATH: str = "./toystock/logs/app.log"

    # Import / export
    CURRENCY_SYMBOL: str = "$"
    EXPORT_TITLE: str = "Prime Toys - Stock List"
    EXPORT_BASENAME: str = "prime-toys-stock"
    EXPORT_SHEET_NAME: str = "Stock List"
    IMPORT_EXTENSIONS: List[str] = [".xlsx", ".xls"]

    class Config:
        """Configure environment file loading behavior."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
