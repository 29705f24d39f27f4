"""
Configuration management for the parish booker storage gateway.

Loads and validates environment variables for the application.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Storage gateway settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    # Service configuration
    SERVICE_NAME: str = Field(default="parish-booker")
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    LOG_JSON: bool = Field(default=True)

    # Storage backend
    STORAGE_BACKEND: Literal["memory", "redis"] = Field(default="memory")
    STORAGE_KEY_PREFIX: str = Field(default="app_")

    # Redis (only used when STORAGE_BACKEND=redis)
    REDIS_URL: str = Field(default="redis://localhost:6379/0")
    REDIS_MAX_CONNECTIONS: int = Field(default=10, ge=1)
    REDIS_SOCKET_TIMEOUT: int = Field(default=5, ge=1)
    REDIS_CONNECT_TIMEOUT: int = Field(default=5, ge=1)

    # Simulated network latency (seconds)
    SIMULATE_LATENCY: bool = Field(default=False)
    LATENCY_LOGIN_SECONDS: float = Field(default=0.5, ge=0)
    LATENCY_REGISTER_SECONDS: float = Field(default=0.6, ge=0)
    LATENCY_PASSWORD_UPDATE_SECONDS: float = Field(default=0.5, ge=0)
    LATENCY_CONFIG_UPDATE_SECONDS: float = Field(default=0.4, ge=0)
    LATENCY_BOOKING_CREATE_SECONDS: float = Field(default=0.6, ge=0)

    # Report unknown ids on update operations instead of silently succeeding
    RAISE_ON_MISSING_ID: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
