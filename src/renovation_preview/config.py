"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "renders"
    public_base_url: str = "http://localhost:3000"
    max_composite_dimension: int = 1500
    composite_jpeg_quality: int = 85
    composite_timeout_seconds: float = 15.0
    stencil_timeout_seconds: float = 5.0
    http_timeout_seconds: float = 20.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
