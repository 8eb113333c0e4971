"""
Systems Hub
Configuration classes for Flask App Factory.

Usage:
    config_name = os.getenv("APP_ENV", "development")
    app.config.from_object(config[config_name])
"""

import os
import secrets

# Generate a random key for development; production MUST use a stable env var
_DEV_SECRET = secrets.token_hex(32)

ACCOUNT_TYPES = ("agency", "consultant", "business")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Base configuration shared across all environments."""

    SECRET_KEY = os.getenv("SECRET_KEY", _DEV_SECRET)
    DEBUG = False
    TESTING = False

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Rate limiter storage (memory:// for a single process)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # Upload cap for ROI imports and source payloads
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(2 * 1024 * 1024)))  # 2 MB

    # Synthesis context: who is looking at the hub
    HUB_ACCOUNT_TYPE = os.getenv("HUB_ACCOUNT_TYPE", "agency")
    HUB_ACCOUNT_NAME = os.getenv("HUB_ACCOUNT_NAME", "")
    HUB_FEATURED_TOOLS = _env_bool("HUB_FEATURED_TOOLS", "true")

    # Optional JSON file of {clients, projects} loaded at startup
    HUB_SOURCE_FILE = os.getenv("HUB_SOURCE_FILE")


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True


class TestingConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    RATELIMIT_ENABLED = False
    HUB_ACCOUNT_TYPE = "agency"
    HUB_ACCOUNT_NAME = ""
    HUB_FEATURED_TOOLS = False
    HUB_SOURCE_FILE = None


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")  # Must be set explicitly in production

    def __init__(self):
        if not os.getenv("SECRET_KEY"):
            raise RuntimeError("SECRET_KEY environment variable must be set in production")
        if self.HUB_ACCOUNT_TYPE not in ACCOUNT_TYPES:
            raise RuntimeError(
                f"HUB_ACCOUNT_TYPE must be one of {', '.join(ACCOUNT_TYPES)}")


# Configuration mapping: environment name -> config class
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
