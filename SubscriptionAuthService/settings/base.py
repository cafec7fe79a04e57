"""
Base Django settings for SubscriptionAuthService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "DJANGO_SECRET_KEY", "django-insecure-7l$v0q3!r8^kz1m@d2u#x5w9p&c4n6b0j%t*e(y)h-a+s=f"
)

SERVICE_VERSION = "1.0.0"

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    "corsheaders",
    # Local apps
    "SubscriptionAuthService.apps.SubscriptionAuthServiceConfig",
    "core",
    "authentication",
    "subscriptions.apps.SubscriptionsConfig",
    "api",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    # Custom middleware
    "core.middleware.security_headers.SecurityHeadersMiddleware",
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.rate_limit.RateLimitMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "core.middleware.auth.RequestAuthenticationMiddleware",
]

ROOT_URLCONF = "SubscriptionAuthService.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "SubscriptionAuthService.wsgi.application"
ASGI_APPLICATION = "SubscriptionAuthService.asgi.application"

# Database
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "subscription_auth"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "Subscription Auth Service API",
    "DESCRIPTION": (
        "Issues, verifies, renews and revokes time-bounded subscription licenses. "
        "Client endpoints require an HMAC-signed request envelope; admin endpoints "
        "require the admin password."
    ),
    "VERSION": SERVICE_VERSION,
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api",
    "TAGS": [
        {"name": "Subscriptions", "description": "Client subscription endpoints"},
        {"name": "Admin", "description": "Operator endpoints"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
}

# Redis Cache
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/1"),
        "OPTIONS": {
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
        },
    }
}

# Subscription authentication
SUBSCRIPTION_AUTH = {
    "API_SECRET_KEY": os.environ.get("API_SECRET_KEY", ""),
    "ADMIN_PASSWORD_HASH": os.environ.get("ADMIN_PASSWORD_HASH", ""),
    "REPLAY_WINDOW_MS": int(os.environ.get("REPLAY_WINDOW_MS", "300000")),
    "REQUIRE_SIGNED_REQUESTS": os.environ.get("REQUIRE_SIGNED_REQUESTS", "true").lower() == "true",
}

# Product scope -> document collection
SUBSCRIPTION_PRODUCT_SCOPES = {
    "default": "subscriptions",
    "rainbowg": "rainbowg_subscriptions",
}

# Plan name -> duration in days
SUBSCRIPTION_PLANS = {
    "basic": 30,
    "premium": 90,
}
SUBSCRIPTION_RENEWAL_DAYS = 30
SUBSCRIPTION_MAX_DURATION_DAYS = 3650

# Rate limiting (per client IP)
RATE_LIMIT = {
    "ENABLED": True,
    "MAX_REQUESTS": int(os.environ.get("RATE_LIMIT_MAX_REQUESTS", "100")),
    "WINDOW_SECONDS": int(os.environ.get("RATE_LIMIT_WINDOW_MS", "900000")) // 1000,
}

# CORS
CORS_ORIGIN = os.environ.get("CORS_ORIGIN", "*")
if CORS_ORIGIN == "*":
    CORS_ALLOW_ALL_ORIGINS = True
else:
    CORS_ALLOWED_ORIGINS = [origin.strip() for origin in CORS_ORIGIN.split(",") if origin.strip()]
CORS_ALLOW_METHODS = ["GET", "POST", "OPTIONS"]

# Observability
LOGGING = get_logging_config(
    log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    log_dir=os.environ.get("LOG_DIR"),
)
