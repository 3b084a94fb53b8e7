"""
Configuration management for the Furniture AR catalog API.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Furniture AR Catalog")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # API
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_workers: int = Field(default=1)
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Database
    database_url: str = Field(default="sqlite:///./furniture_ar.db")
    resolver_timeout_seconds: int = Field(
        default=5,
        description="Statement timeout applied to PostgreSQL connections.",
    )

    # Public URLs
    public_base_url: str = Field(
        default="https://newfurniture.live",
        description="Absolute origin encoded into QR codes and returned share links.",
    )
    viewer_base_url: str = Field(
        default="",
        description="Origin prefixed to /view redirects. Empty = relative redirect.",
    )

    # QR codes
    qr_default_size: int = Field(default=256)
    qr_cache_max_age: int = Field(default=31536000)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
