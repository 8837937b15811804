"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    stripe_secret_key: str
    stripe_webhook_secret: str
    stripe_currency: str = "usd"
    resend_api_key: str
    resend_api_url: str = "https://api.resend.com"
    email_from: str = "assistant@onboardflow.com"
    app_url: str = "http://localhost:8000"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
