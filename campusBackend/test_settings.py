import os

# Mock SECRET_KEY for tests BEFORE importing settings
os.environ.setdefault("SECRET_KEY", "django-insecure-test-key-for-unit-tests-only")

from .settings import *  # noqa: F403

TESTING = True
DEBUG = False

# Override Database to use in-memory SQLite for tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Disable external services
OPENAI_API_KEY = ""
GEMINI_API_KEY = ""
AI_USE_MOCK = False

STORAGE_BACKEND = "placeholder"
STORAGE_PLACEHOLDER_FALLBACK = True

AUTH_COOKIE_SECURE = False
TRACING_ENABLED = False

LOGGING["loggers"]["authentication"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["marketplace"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["chat"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["infrastructure"]["level"] = "WARNING"  # noqa: F405


class DisableMigrations:
    """Build every app's tables straight from the models."""

    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()
