"""
Test settings for SubscriptionAuthService.
"""

import hashlib
import os

from .base import *  # noqa: F403, F401

DEBUG = False

# Use PostgreSQL in CI (from DATABASE_URL), SQLite in-memory for local tests
DATABASE_URL = os.environ.get("DATABASE_URL")
if DATABASE_URL and DATABASE_URL.startswith("postgresql"):
    import urllib.parse

    parsed = urllib.parse.urlparse(DATABASE_URL)
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": parsed.path.lstrip("/"),
            "USER": parsed.username or "postgres",
            "PASSWORD": parsed.password or "",
            "HOST": parsed.hostname or "localhost",
            "PORT": parsed.port or 5432,
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": ":memory:",
        }
    }

# Use in-memory cache for tests
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Password hashers for faster tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

TEST_API_SECRET_KEY = "test-api-secret-key"
TEST_ADMIN_PASSWORD = "test-admin-password"

SUBSCRIPTION_AUTH = {
    "API_SECRET_KEY": TEST_API_SECRET_KEY,
    "ADMIN_PASSWORD_HASH": hashlib.sha256(TEST_ADMIN_PASSWORD.encode("utf-8")).hexdigest(),
    "REPLAY_WINDOW_MS": 300_000,
    "REQUIRE_SIGNED_REQUESTS": True,
}

RATE_LIMIT = {
    "ENABLED": True,
    "MAX_REQUESTS": 10_000,
    "WINDOW_SECONDS": 900,
}

# Disable logging during tests
LOGGING_CONFIG = None
