# tests/settings.py
"""
Test settings: SQLite in memory, no migrations, no throttling.
"""

import os

os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("POSTGRES_PASSWORD", "unused-in-tests")

from core.settings import *  # noqa: E402,F401,F403

DEBUG = False
TESTING = True

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
        "ATOMIC_REQUESTS": True,
    }
}


class DisableMigrations:
    """Build tables straight from the models."""

    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()

# Faster password hashing for tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "coachfit-tests",
    }
}

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_RATES": {
        "anon": "100000/minute",
        "user": "100000/minute",
        "auth": "100000/minute",
    },
}

SECURE_SSL_REDIRECT = False
MAINTENANCE_MODE = False

PAYMENT_CONFIG = {
    **PAYMENT_CONFIG,
    "SECRET_KEY": "test_sk_secret",
    "CLIENT_KEY": "test_ck_client",
    "API_BASE": "https://api.tosspayments.test",
}

SUPABASE_CONFIG = {
    **SUPABASE_CONFIG,
    "URL": "https://project.supabase.test",
    "ANON_KEY": "anon-key",
    "SERVICE_ROLE_KEY": "service-role-key",
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

LOGGING["root"]["level"] = "WARNING"
for _logger in LOGGING["loggers"].values():
    _logger["handlers"] = ["console"]
    _logger["level"] = "WARNING"
