# flake8: noqa
"""
Test settings: in-memory SQLite, in-process email outbox and a fast hasher.
"""

from .base import *

ENVIRONMENT = "test"

DEBUG = False
SECRET_KEY = "django-insecure-test-key"
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CACHES = {
    "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}
}

# Keep test output quiet; tests patch module loggers when they assert on logs
for logger_name in ["django", "core", "users", "axes", "finance"]:
    LOGGING["loggers"][logger_name]["level"] = "WARNING"
LOGGING["loggers"]["django.request"]["level"] = "ERROR"
