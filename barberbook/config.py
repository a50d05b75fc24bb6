# barberbook/config.py
"""Application settings"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables"""

    APP_NAME: str = Field(default="Barberbook")
    DEBUG: bool = Field(default=False)

    # Database settings
    DATABASE_URL: str = Field(default="sqlite:///./barberbook.db")
    DB_ECHO: bool = Field(default=False)

    # JWT settings
    SECRET_KEY: str = Field(default="change-me-later")
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30)

    # Scheduling
    DEFAULT_SLOT_DURATION: int = Field(default=30)
    MIN_SLOT_DURATION: int = Field(default=5)
    MAX_SLOT_DURATION: int = Field(default=240)

    LOG_LEVEL: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
