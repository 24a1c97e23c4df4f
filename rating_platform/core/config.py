"""Application configuration loaded via pydantic settings."""

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Strongly-typed application settings with environment overrides."""

    # Application
    APP_NAME: str = "Store Rating Platform"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Sessions
    SESSION_TTL_MINUTES: int = 60 * 24 * 7
    SESSION_SWEEP_INTERVAL_SECONDS: int = 900
    SESSION_COOKIE_NAME: str = "rating_session"
    SESSION_COOKIE_SECURE: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./rating_platform/ratings.db"
    DB_BUSY_TIMEOUT_SECONDS: float = 30.0

    # Seed admin (development only)
    SEED_ADMIN: bool = True
    SEED_ADMIN_EMAIL: str = "admin@ratings.example.com"
    SEED_ADMIN_PASSWORD: str = "Admin1234!"
    SEED_ADMIN_NAME: str = "Default Platform Administrator"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_LEVELS: str = "TRACE,ERROR,WARNING,INFO"
    LOG_FILE_PATH: str = "./rating_platform/logs/app.log"

    class Config:
        """Configure environment file loading behavior."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
