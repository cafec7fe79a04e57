"""
Service container.

Built once when the subscriptions app is ready and handed to the
middleware and views; nothing here is created lazily per request.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.apps import apps
from django.conf import settings

from authentication.domain.credentials import CredentialVerifier
from authentication.domain.signing import RequestSigner
from core.config import AuthConfig, load_auth_config, product_scopes
from subscriptions.domain.services import SubscriptionStateMachine
from subscriptions.infrastructure.repositories.django_subscription_store import (
    DjangoSubscriptionStore,
)
from subscriptions.ports.subscription_store import SubscriptionStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Long-lived collaborators shared by every request."""

    config: AuthConfig
    store: SubscriptionStore
    credential_verifier: CredentialVerifier
    request_signer: RequestSigner
    state_machine: SubscriptionStateMachine


def build_container(
    config: Optional[AuthConfig] = None, store: Optional[SubscriptionStore] = None
) -> ServiceContainer:
    """
    Construct the service container.

    Args:
        config: Authentication config (loaded from settings if omitted)
        store: Store adapter (Django document store if omitted)

    Returns:
        ServiceContainer

    Raises:
        ConfigurationError: If a required secret is missing
    """
    config = config or load_auth_config()
    store = store or DjangoSubscriptionStore(product_scopes())
    container = ServiceContainer(
        config=config,
        store=store,
        credential_verifier=CredentialVerifier(config.admin_password_hash),
        request_signer=RequestSigner(config.api_secret_key, config.replay_window_ms),
        state_machine=SubscriptionStateMachine(
            store,
            max_duration_days=getattr(settings, "SUBSCRIPTION_MAX_DURATION_DAYS", 3650),
        ),
    )
    if not container.credential_verifier.is_hardened:
        logger.warning(
            "ADMIN_PASSWORD_HASH is an unsalted SHA-256 digest; "
            "consider regenerating it with generate_credentials --hardened"
        )
    return container


def get_container() -> ServiceContainer:
    """Return the container built at startup."""
    return apps.get_app_config("subscriptions").container
