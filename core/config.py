"""
Startup configuration for the authentication core.

Secrets come from the environment through Django settings. A missing
secret is fatal: the process must not serve traffic without one.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List

from django.conf import settings

from core.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = {
    "API_SECRET_KEY": "API_SECRET_KEY",
    "ADMIN_PASSWORD_HASH": "ADMIN_PASSWORD_HASH",
}


@dataclass(frozen=True)
class AuthConfig:
    """Validated authentication configuration."""

    api_secret_key: str
    admin_password_hash: str
    replay_window_ms: int
    require_signed_requests: bool


def _auth_settings() -> Dict:
    return getattr(settings, "SUBSCRIPTION_AUTH", {}) or {}


def missing_settings() -> List[str]:
    """
    List required environment variables that are not set.

    Returns:
        Names of missing variables (empty when configuration is complete)
    """
    auth = _auth_settings()
    return [env_name for key, env_name in REQUIRED_SETTINGS.items() if not auth.get(key)]


def load_auth_config() -> AuthConfig:
    """
    Build the authentication configuration.

    Returns:
        AuthConfig

    Raises:
        ConfigurationError: If any required secret is missing
    """
    missing = missing_settings()
    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}",
            missing=missing,
        )

    auth = _auth_settings()
    return AuthConfig(
        api_secret_key=auth["API_SECRET_KEY"],
        admin_password_hash=auth["ADMIN_PASSWORD_HASH"],
        replay_window_ms=int(auth.get("REPLAY_WINDOW_MS", 300_000)),
        require_signed_requests=bool(auth.get("REQUIRE_SIGNED_REQUESTS", True)),
    )


def product_scopes() -> Dict[str, str]:
    """Product scope -> collection mapping."""
    return dict(getattr(settings, "SUBSCRIPTION_PRODUCT_SCOPES", {"default": "subscriptions"}))
