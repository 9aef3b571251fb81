"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal
from urllib.parse import urlsplit

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Strava OAuth Configuration
    strava_client_id: str = Field(default="", description="Strava API Client ID")
    strava_client_secret: str = Field(default="", description="Strava API Client Secret")
    strava_redirect_uri: str = Field(default="", description="OAuth callback URL registered with Strava")
    strava_oauth_base_url: str = Field(default="https://www.strava.com/oauth", description="Strava OAuth Base URL")
    strava_api_base_url: str = Field(default="https://www.strava.com/api/v3", description="Strava API Base URL")
    strava_activities_per_page: int = Field(default=100, ge=1, le=200, description="Activities fetched per profile request")

    # Frontend Configuration
    frontend_url: str = Field(default="http://localhost:8000", description="Frontend URL used for CORS and redirects")
    oauth_flow: Literal["popup", "redirect"] = Field(default="popup", description="How the OAuth callback hands the token to the browser")

    # Application Configuration
    app_host: str = Field(default="0.0.0.0", description="Application host")
    app_port: int = Field(default=8000, description="Application port")
    app_debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def frontend_origin(self) -> str:
        """Scheme and host of the frontend URL, without any path."""
        parts = urlsplit(self.frontend_url)
        if not parts.scheme or not parts.netloc:
            return self.frontend_url.rstrip("/")
        return f"{parts.scheme}://{parts.netloc}"


@lru_cache
def get_settings() -> Settings:
    """Build the settings once per process."""
    return Settings()
