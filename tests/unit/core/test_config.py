"""
Unit tests for startup configuration.
"""
import pytest
from django.test import override_settings

from core.config import load_auth_config, missing_settings, product_scopes
from core.domain.exceptions import ConfigurationError
from subscriptions.container import build_container
from subscriptions.infrastructure.repositories.in_memory_subscription_store import (
    InMemorySubscriptionStore,
)

COMPLETE = {
    "API_SECRET_KEY": "secret",
    "ADMIN_PASSWORD_HASH": "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad",
}


class TestLoadAuthConfig:
    """Tests for load_auth_config."""

    def test_complete_configuration(self):
        """All values are read, with defaults for the optional ones."""
        with override_settings(SUBSCRIPTION_AUTH=COMPLETE):
            config = load_auth_config()
        assert config.api_secret_key == "secret"
        assert config.replay_window_ms == 300_000
        assert config.require_signed_requests is True

    def test_missing_secrets_are_all_listed(self):
        """Every missing variable is named in the error."""
        with override_settings(SUBSCRIPTION_AUTH={"API_SECRET_KEY": ""}):
            assert missing_settings() == ["API_SECRET_KEY", "ADMIN_PASSWORD_HASH"]
            with pytest.raises(ConfigurationError) as exc_info:
                load_auth_config()
        assert exc_info.value.missing == ["API_SECRET_KEY", "ADMIN_PASSWORD_HASH"]
        assert "ADMIN_PASSWORD_HASH" in exc_info.value.message

    def test_signed_requests_can_be_disabled(self):
        """REQUIRE_SIGNED_REQUESTS is honoured."""
        with override_settings(SUBSCRIPTION_AUTH=dict(COMPLETE, REQUIRE_SIGNED_REQUESTS=False)):
            assert load_auth_config().require_signed_requests is False


class TestBuildContainer:
    """Tests for service container construction."""

    def test_build_fails_fast_without_secrets(self):
        """A missing secret aborts construction."""
        with override_settings(SUBSCRIPTION_AUTH={}):
            with pytest.raises(ConfigurationError):
                build_container()

    def test_build_wires_services(self):
        """The container shares one store between its services."""
        store = InMemorySubscriptionStore()
        with override_settings(SUBSCRIPTION_AUTH=COMPLETE):
            container = build_container(store=store)
        assert container.store is store
        assert container.state_machine.store is store
        assert container.credential_verifier.verify("abc") is True
        assert container.request_signer.replay_window_ms == 300_000


def test_product_scopes_from_settings():
    """Configured scopes map to their collections."""
    assert product_scopes() == {
        "default": "subscriptions",
        "rainbowg": "rainbowg_subscriptions",
    }
