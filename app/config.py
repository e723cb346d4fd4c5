# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for admin sign-in)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        ...,
        description="Legacy HS256 secret used to verify Supabase access tokens"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (live update fan-out)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for table change pub/sub"
    )

    REALTIME_ENABLED: bool = Field(
        default=True,
        description="Relay Supabase Realtime changes to WebSocket clients (falls back to Redis when off or unavailable)"
    )

    # -------------------------------------------------------------------------
    # Storage Layout
    # -------------------------------------------------------------------------
    # Folder names follow what is already in the production bucket

    STORAGE_BUCKET: str = Field(
        default="Gallery",
        description="Storage bucket holding every media asset"
    )

    GALLERY_FOLDER: str = Field(
        default="EVENT PHOTOS",
        description="Folder listed by the gallery and home slideshow"
    )

    EVENT_IMAGE_FOLDER: str = Field(
        default="EVENT",
        description="Folder for event banner images"
    )

    MEMBER_IMAGE_FOLDER: str = Field(
        default="TEAM_PROFILE",
        description="Folder for member portraits"
    )

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum size of a single uploaded media file in MB"
    )

    # -------------------------------------------------------------------------
    # Team Classification
    # -------------------------------------------------------------------------

    ADMINISTRATION_RULE: Literal["category", "rank"] = Field(
        default="category",
        description=(
            "Which field decides the administration group: 'category' "
            "(category == administration) or 'rank' (rank <= 2)"
        )
    )

    # -------------------------------------------------------------------------
    # Contact Page
    # -------------------------------------------------------------------------

    CONTACT_EMAIL: str = Field(default="council@rec.ac.in")
    CONTACT_PHONE: str = Field(default="")
    CONTACT_ADDRESS: str = Field(default="REC Ambedkar Nagar, Uttar Pradesh")
    CONTACT_FORM_ACTION: str = Field(
        default="https://api.web3forms.com/submit",
        description="Endpoint the public contact form posts to"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://council.app" -> ["http://localhost:3000", "https://council.app"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
