"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_API_BASE_URL = "https://fruit-planner-backend.onrender.com/api"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_base_url: str = DEFAULT_API_BASE_URL
    api_timeout_seconds: float = 15
    environment: str = _ENVIRONMENT
    app_name: str = "FruitPlan AI"
    app_version: str = "1.0.0"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Return True when running against the production backend."""
        return self.environment == "production"

    def resolved_api_base_url(self) -> str:
        """Return the API base URL, pinned to the default in production."""
        if self.is_production:
            return DEFAULT_API_BASE_URL
        return self.api_base_url.rstrip("/")
