"""
Application Configuration

Centralized configuration management using Pydantic settings.
Handles environment variables, secrets, and database selection.
"""

from typing import Optional
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    APP_NAME: str = "Jobly"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None
    TESTING: bool = False

    # Security
    SECRET_KEY: str = "secret-dev"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_WORK_FACTOR: int = 12

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://localhost/jobly"
    TEST_DATABASE_URL: str = "postgresql+asyncpg://localhost/jobly_test"
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10
    SLOW_QUERY_THRESHOLD_SECONDS: float = 1.0

    # API client
    API_BASE_URL: str = "http://localhost:3001"
    API_TIMEOUT_SECONDS: float = 10.0

    def get_database_uri(self) -> str:
        """Get the database URL for the current environment."""
        return self.TEST_DATABASE_URL if self.TESTING else self.DATABASE_URL

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
