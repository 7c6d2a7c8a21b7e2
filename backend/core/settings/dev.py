# flake8: noqa
"""
Development environment settings for Budget Buddy.

Extends base settings with a local PostgreSQL database, relaxed security,
console email delivery of one-time passcodes and verbose logging.
"""

import logging

from .base import *
from .utils import load_environment_config

config = load_environment_config("development")

ENVIRONMENT = "development"

# =============================================================================
# SECURITY SETTINGS FOR DEVELOPMENT
# =============================================================================

DEBUG = True
SECRET_KEY = config("SECRET_KEY", default="django-insecure-dev-key-change-in-production")
ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

CORS_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
CORS_ALLOW_ALL_ORIGINS = True  # Only for development!

# =============================================================================
# EMAIL CONFIGURATION FOR DEVELOPMENT
# =============================================================================

# OTP codes are printed to the console instead of being sent
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"
DEFAULT_FROM_EMAIL = "dev@budget-buddy.local"

# =============================================================================
# DATABASE CONFIGURATION FOR DEVELOPMENT
# =============================================================================

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": config("POSTGRES_DB", default="budget_buddy"),
        "USER": config("POSTGRES_USER", default="postgres"),
        "PASSWORD": config("POSTGRES_PASSWORD", default="postgres"),
        "HOST": config("DB_HOST", default="localhost"),
        "PORT": "5432",
    }
}

# =============================================================================
# LOGGING FOR DEVELOPMENT
# =============================================================================

os.makedirs(BASE_DIR / "logs", exist_ok=True)

LOGGING["handlers"]["console"]["level"] = "DEBUG"
LOGGING["handlers"]["development_file"] = {
    "level": "DEBUG",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": BASE_DIR / "logs" / "django_dev.log",
    "maxBytes": 1024 * 1024 * 10,  # 10MB
    "backupCount": 5,
    "formatter": "structured",
    "encoding": "utf-8",
}

for logger_name in ["django", "core", "users", "axes", "finance"]:
    LOGGING["loggers"][logger_name]["handlers"] = ["console", "development_file"]
    LOGGING["loggers"][logger_name]["level"] = "DEBUG"

# Flip to "DEBUG" to print every SQL statement
LOGGING["loggers"]["django.db.backends"]["level"] = config(
    "DB_QUERY_LOGGING_LEVEL", default="INFO"
)

logger = logging.getLogger(__name__)
logger.info(
    "Development environment initialized",
    extra={
        "environment": ENVIRONMENT,
        "debug_mode": DEBUG,
        "allowed_hosts": ALLOWED_HOSTS,
        "action": "environment_startup",
        "component": "settings",
    },
)

print(f"=== Running in {ENVIRONMENT} mode ===")
