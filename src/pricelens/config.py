"""
Configuration management for Pricelens.
"""
import os
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Application configuration."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    SRC_DIR = PROJECT_ROOT / "src"

    # Search provider
    # Options: "serpapi" (SerpApi google_shopping engine) or "serper" (google.serper.dev)
    SEARCH_PROVIDER: str = os.getenv("SEARCH_PROVIDER", "serpapi")

    # API Keys
    SERP_API_KEY: Optional[str] = os.getenv("SERP_API_KEY")
    SERPER_API_KEY: Optional[str] = os.getenv("SERPER_API_KEY")

    # Search defaults
    SEARCH_REGION: str = os.getenv("SEARCH_REGION", "us")
    SEARCH_LANGUAGE: str = os.getenv("SEARCH_LANGUAGE", "en")
    SEARCH_TIMEOUT_S: int = int(os.getenv("SEARCH_TIMEOUT_S", "30"))
    SEARCH_MAX_RESULTS: int = int(os.getenv("SEARCH_MAX_RESULTS", "100"))

    # Aggregation thresholds
    MIN_STORE_TARGET: int = int(os.getenv("MIN_STORE_TARGET", "50"))
    VARIANT_QUERY_MIN_LENGTH: int = int(os.getenv("VARIANT_QUERY_MIN_LENGTH", "20"))
    MARKETPLACE_LISTING_CAP: int = int(os.getenv("MARKETPLACE_LISTING_CAP", "15"))

    # Result cache
    CACHE_ENABLED: bool = _env_bool("CACHE_ENABLED", "True")
    CACHE_TTL_HOURS: float = float(os.getenv("CACHE_TTL_HOURS", "24"))
    CACHE_MAX_ENTRIES: int = int(os.getenv("CACHE_MAX_ENTRIES", "500"))

    # Flask settings
    FLASK_ENV: str = os.getenv("FLASK_ENV", "development")
    FLASK_DEBUG: bool = _env_bool("FLASK_DEBUG", "True")
    FLASK_HOST: str = os.getenv("FLASK_HOST", "0.0.0.0")
    FLASK_PORT: int = int(os.getenv("FLASK_PORT", "5000"))
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def validate(cls) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if cls.SEARCH_PROVIDER not in ("serpapi", "serper"):
            errors.append(f"Invalid SEARCH_PROVIDER: {cls.SEARCH_PROVIDER}. Must be 'serpapi' or 'serper'")
        elif cls.SEARCH_PROVIDER == "serpapi" and not cls.SERP_API_KEY:
            errors.append("SERP_API_KEY not set (required for serpapi provider)")
        elif cls.SEARCH_PROVIDER == "serper" and not cls.SERPER_API_KEY:
            errors.append("SERPER_API_KEY not set (required for serper provider)")

        if cls.SEARCH_TIMEOUT_S <= 0:
            errors.append(f"SEARCH_TIMEOUT_S must be positive, got {cls.SEARCH_TIMEOUT_S}")

        if not 1 <= cls.SEARCH_MAX_RESULTS <= 100:
            errors.append(f"SEARCH_MAX_RESULTS must be between 1 and 100, got {cls.SEARCH_MAX_RESULTS}")

        if cls.CACHE_TTL_HOURS <= 0:
            errors.append(f"CACHE_TTL_HOURS must be positive, got {cls.CACHE_TTL_HOURS}")

        if cls.CACHE_MAX_ENTRIES <= 0:
            errors.append(f"CACHE_MAX_ENTRIES must be positive, got {cls.CACHE_MAX_ENTRIES}")

        return errors

    @classmethod
    def is_valid(cls) -> bool:
        """Check if configuration is valid."""
        return len(cls.validate()) == 0

    @classmethod
    def get_cors_origins(cls) -> list[str]:
        """Parse CORS_ORIGINS into a list ("*" means any origin)."""
        origins = [o.strip() for o in cls.CORS_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]

    @classmethod
    def get_summary(cls) -> dict:
        """Get configuration summary (safe for logging)."""
        return {
            "flask_env": cls.FLASK_ENV,
            "flask_debug": cls.FLASK_DEBUG,
            "search_provider": cls.SEARCH_PROVIDER,
            "search_region": cls.SEARCH_REGION,
            "serp_api_configured": cls.SERP_API_KEY is not None,
            "serper_api_configured": cls.SERPER_API_KEY is not None,
            "cache_enabled": cls.CACHE_ENABLED,
            "cache_ttl_hours": cls.CACHE_TTL_HOURS,
            "cache_max_entries": cls.CACHE_MAX_ENTRIES,
            "min_store_target": cls.MIN_STORE_TARGET,
            "log_level": cls.LOG_LEVEL,
        }
