"""
Configuration module for the Namma Bengaluru Guide backend.

Loads environment variables and validates required settings.
"""
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv

# Load .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _optional_float(name: str) -> Optional[float]:
    """Read an optional float environment variable (empty means unset)."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return float(raw)


class Settings:
    """Application settings loaded from environment variables."""

    # Google Gemini API
    # GEMINI_API_KEY is the primary name, GOOGLE_API_KEY is accepted as well
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", os.getenv("GOOGLE_API_KEY", ""))
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GEMINI_TEMPERATURE: float = float(os.getenv("GEMINI_TEMPERATURE", "0.3"))
    GEMINI_MAX_OUTPUT_TOKENS: int = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "4096"))

    # Map defaults (Bangalore city centre)
    DEFAULT_MAP_LATITUDE: float = float(os.getenv("DEFAULT_MAP_LATITUDE", "12.9716"))
    DEFAULT_MAP_LONGITUDE: float = float(os.getenv("DEFAULT_MAP_LONGITUDE", "77.5946"))
    DEFAULT_MAP_ZOOM: int = int(os.getenv("DEFAULT_MAP_ZOOM", "13"))

    # Geolocation source: "ip" (IP lookup over HTTP) or "static" (fixed coordinates)
    GEOLOCATION_PROVIDER: str = os.getenv("GEOLOCATION_PROVIDER", "ip")
    IP_GEOLOCATION_URL: str = os.getenv("IP_GEOLOCATION_URL", "http://ip-api.com/json/")
    GEOLOCATION_TIMEOUT_SECONDS: float = float(os.getenv("GEOLOCATION_TIMEOUT_SECONDS", "5"))
    DEVICE_LATITUDE: Optional[float] = _optional_float("DEVICE_LATITUDE")
    DEVICE_LONGITUDE: Optional[float] = _optional_float("DEVICE_LONGITUDE")

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS Settings (only enforced in production, see main._get_cors_origins)
    CORS_ALLOWED_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    ]

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required settings are configured.

        Raises:
            ValueError: If any required setting is missing or malformed.
        """
        required_settings = {
            "GEMINI_API_KEY": cls.GEMINI_API_KEY,
        }

        missing = [key for key, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )

        if cls.GEOLOCATION_PROVIDER not in ("ip", "static"):
            raise ValueError(
                f"Unknown GEOLOCATION_PROVIDER '{cls.GEOLOCATION_PROVIDER}'. "
                "Expected 'ip' or 'static'."
            )

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"


# Create a singleton instance
settings = Settings()

# Validate settings on module import (will fail fast if misconfigured)
# Skip validation during tests or when importing for introspection
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # In development, warn but don't crash
        if settings.is_development():
            logger.warning(f"{e} The app may not work correctly until you configure your .env file.")
        else:
            raise
