# flake8: noqa
"""
Production environment settings for Budget Buddy.

Extends base settings with hardened security headers, SMTP delivery of
one-time passcodes, pooled PostgreSQL connections and JSON logs for
aggregation.
"""

import logging

from .base import *
from .utils import load_environment_config

config = load_environment_config("production")

ENVIRONMENT = "production"

DEBUG = False
SECRET_KEY = config("SECRET_KEY")
ALLOWED_HOSTS = config(
    "ALLOWED_HOSTS",
    default="budget-buddy.app,api.budget-buddy.app",
    cast=lambda value: [host.strip() for host in value.split(",") if host.strip()],
)

CORS_ALLOWED_ORIGINS = [
    "https://budget-buddy.app",
    "https://www.budget-buddy.app",
]
CORS_ALLOW_ALL_ORIGINS = False

SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True

# OTP delivery
EMAIL_BACKEND = "django.core.mail.backends.smtp.EmailBackend"
EMAIL_HOST = config("EMAIL_HOST", default="smtp.gmail.com")
EMAIL_PORT = config("EMAIL_PORT", default=587, cast=int)
EMAIL_USE_TLS = True
EMAIL_HOST_USER = config("EMAIL_HOST_USER")
EMAIL_HOST_PASSWORD = config("EMAIL_HOST_PASSWORD")
DEFAULT_FROM_EMAIL = config("DEFAULT_FROM_EMAIL", default="noreply@budget-buddy.app")

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": config("POSTGRES_DB"),
        "USER": config("POSTGRES_USER"),
        "PASSWORD": config("POSTGRES_PASSWORD"),
        "HOST": config("DB_HOST"),
        "PORT": "5432",
        "CONN_MAX_AGE": 60,  # Connection pooling 1 minute
        "OPTIONS": {
            "connect_timeout": 5,
        },
    }
}

LOG_DIR = config("LOG_DIR", default="/var/log/budget-buddy")

LOGGING["handlers"]["production_file"] = {
    "level": "INFO",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": f"{LOG_DIR}/production.log",
    "maxBytes": 1024 * 1024 * 100,  # 100MB
    "backupCount": 10,
    "formatter": "json",
    "encoding": "utf-8",
}

LOGGING["handlers"]["production_errors"] = {
    "level": "ERROR",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": f"{LOG_DIR}/production_errors.log",
    "maxBytes": 1024 * 1024 * 50,  # 50MB
    "backupCount": 10,
    "formatter": "json",
    "encoding": "utf-8",
}

LOGGING["handlers"]["production_security"] = {
    "level": "WARNING",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": f"{LOG_DIR}/security.log",
    "maxBytes": 1024 * 1024 * 50,  # 50MB
    "backupCount": 10,
    "formatter": "json",
    "encoding": "utf-8",
}

for logger_name in ["django", "core", "users", "axes", "finance"]:
    LOGGING["loggers"][logger_name]["handlers"] = [
        "console",
        "production_file",
        "production_errors",
    ]
    LOGGING["loggers"][logger_name]["level"] = "INFO"

# Lockouts and suspicious requests go to the security log as well
LOGGING["loggers"]["axes"]["handlers"].append("production_security")
LOGGING["loggers"]["django.security"]["handlers"] = ["production_security"]

LOGGING["loggers"]["django.db.backends"]["level"] = "ERROR"

os.makedirs(LOG_DIR, exist_ok=True)

# Static files served by whitenoise right after SecurityMiddleware
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"
    },
}

logger = logging.getLogger(__name__)
logger.info(
    "Production environment initialized",
    extra={
        "environment": ENVIRONMENT,
        "debug_mode": DEBUG,
        "allowed_hosts": ALLOWED_HOSTS,
        "action": "environment_startup",
        "component": "settings",
        "severity": "info",
    },
)
