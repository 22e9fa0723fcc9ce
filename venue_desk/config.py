"""
Porirua Club Platform
Configuration classes for Flask App Factory.

Usage:
    config_name = os.getenv("APP_ENV", "development")
    app.config.from_object(config[config_name])
"""

import os
import secrets

from venue_desk.core.exceptions import ConfigurationError

# Generate a random key for development; production MUST use a stable env var
_DEV_SECRET = secrets.token_hex(32)


class Config:
    """Base configuration shared across all environments."""

    SECRET_KEY = os.getenv("SECRET_KEY", _DEV_SECRET)
    DEBUG = False
    TESTING = False

    # Template defaults
    SITE_TITLE = os.getenv("SITE_TITLE", "Porirua Club Platform")

    # View-state classifier: "segment" (anchored) or "substring" (legacy)
    VIEW_STATE_MATCH_MODE = os.getenv("VIEW_STATE_MATCH_MODE", "segment")

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Startup validation
    REQUIRED_ENV_VARS = (
        "SUPABASE_URL",
        "SUPABASE_KEY",
        "DATABASE_URL",
        "AZURE_CLIENT_ID",
        "AZURE_TENANT_ID",
        "AZURE_CLIENT_SECRET",
        "SESSION_SECRET",
    )
    REQUIRED_MODULES = ("flask", "flask_cors", "werkzeug", "jinja2", "dotenv")
    # .env loaded by diagnostics; defaults to the repo root
    ENV_FILE = os.getenv("ENV_FILE")
    STRICT_STARTUP = os.getenv("STRICT_STARTUP", "false").lower() == "true"


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True


class TestingConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    VIEW_STATE_MATCH_MODE = "segment"
    STRICT_STARTUP = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")  # Must be set explicitly in production
    STRICT_STARTUP = os.getenv("STRICT_STARTUP", "true").lower() == "true"

    def __init__(self):
        secret = os.getenv("SECRET_KEY")
        if not secret:
            raise ConfigurationError("Production requires environment variables", missing=["SECRET_KEY"])
        # Current env value, not the one seen at import
        self.SECRET_KEY = secret


# Configuration mapping: environment name -> config class
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
