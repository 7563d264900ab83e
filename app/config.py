# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values, plus the
# immutable CloudinaryConfig handed to the signing core.
#
# Usage:
#   from app.config import settings
#   print(settings.CLOUDINARY_CLOUD_NAME)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Several values accept the VITE_* names the frontend build already uses, so a
# single .env can serve both.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models import CloudinaryConfig


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Secrets (API secret, Supabase keys) are read here and nowhere else.
    They must never be logged or echoed in a response.
    """

    # -------------------------------------------------------------------------
    # Cloudinary Configuration
    # -------------------------------------------------------------------------
    # Empty defaults: a missing value is reported per request as a
    # configuration error instead of crashing the whole app at import time.

    CLOUDINARY_CLOUD_NAME: str = Field(
        default="",
        validation_alias=AliasChoices("CLOUDINARY_CLOUD_NAME", "VITE_CLOUDINARY_CLOUD_NAME"),
        description="Tenant cloud name; URLs for any other cloud are refused"
    )

    CLOUDINARY_API_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("CLOUDINARY_API_KEY", "VITE_CLOUDINARY_API_KEY"),
        description="API key (only needed for Download-API URLs)"
    )

    CLOUDINARY_API_SECRET: str = Field(
        default="",
        validation_alias=AliasChoices("CLOUDINARY_API_SECRET"),
        description="API secret used for both signing modes"
    )

    CLOUDINARY_CDN_DOMAIN: str = Field(
        default="cloudinary.com",
        validation_alias=AliasChoices("CLOUDINARY_CDN_DOMAIN"),
        description="Delivery hosts must be this domain or a subdomain of it"
    )

    CLOUDINARY_DOWNLOAD_API_BASE_URL: str = Field(
        default="https://api.cloudinary.com/v1_1",
        validation_alias=AliasChoices("CLOUDINARY_DOWNLOAD_API_BASE_URL"),
        description="Base URL of the centralized download endpoint"
    )

    # -------------------------------------------------------------------------
    # Supabase Configuration (caller authentication)
    # -------------------------------------------------------------------------
    # Either the service key or the anon key is enough to verify bearer tokens.

    SUPABASE_URL: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_URL", "VITE_SUPABASE_URL"),
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY"),
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        default="",
        validation_alias=AliasChoices(
            "SUPABASE_SERVICE_KEY",
            "SUPABASE_SERVICE_ROLE_KEY",
            "SUPABASE_SERVICE_ROLE",
        ),
        description="Supabase service_role key (preferred for token verification)"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT"),
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        validation_alias=AliasChoices("DEBUG"),
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("API_HOST"),
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("API_PORT"),
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        validation_alias=AliasChoices("CORS_ORIGINS"),
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Treat VAR= as unset so aliases and defaults still apply
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://label.example" -> ["http://localhost:5173", "https://label.example"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def supabase_configured(self) -> bool:
        """True when bearer tokens can be verified against Supabase."""
        return bool(self.SUPABASE_URL and (self.SUPABASE_SERVICE_KEY or self.SUPABASE_ANON_KEY))

    def cloudinary_config(self) -> CloudinaryConfig:
        """
        Snapshot the Cloudinary values into the immutable struct the signer uses.

        Missing values are carried through as empty strings; SigningService
        decides which ones the requested mode actually needs.
        """
        return CloudinaryConfig(
            cloud_name=self.CLOUDINARY_CLOUD_NAME.strip(),
            api_key=self.CLOUDINARY_API_KEY.strip(),
            api_secret=self.CLOUDINARY_API_SECRET,
            cdn_domain=self.CLOUDINARY_CDN_DOMAIN.strip().lower().lstrip("."),
            download_api_base_url=self.CLOUDINARY_DOWNLOAD_API_BASE_URL.rstrip("/"),
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
