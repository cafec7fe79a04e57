"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timezone

import pytest
from django.conf import settings
from django.core.cache import cache

from authentication.domain.signing import RequestSigner
from subscriptions.domain.services import SubscriptionStateMachine
from subscriptions.infrastructure.repositories.django_subscription_store import (
    DjangoSubscriptionStore,
)
from subscriptions.infrastructure.repositories.in_memory_subscription_store import (
    InMemorySubscriptionStore,
)


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set_date(self, year: int, month: int, day: int) -> None:
        """Move the clock to noon UTC on the given day."""
        self.now = datetime(year, month, day, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clear_cache():
    """Reset rate limit counters between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock():
    """Fixture for a clock fixed at 2024-06-01 12:00 UTC."""
    return FixedClock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def memory_store():
    """Fixture for an empty in-memory store."""
    return InMemorySubscriptionStore()


@pytest.fixture
def state_machine(memory_store, clock):
    """Fixture for a state machine over the in-memory store."""
    return SubscriptionStateMachine(memory_store, clock=clock)


@pytest.fixture
def django_store():
    """Fixture for the ORM-backed store with the configured scopes."""
    return DjangoSubscriptionStore(settings.SUBSCRIPTION_PRODUCT_SCOPES)


@pytest.fixture
def signer():
    """Fixture for a signer sharing the test API secret."""
    return RequestSigner(settings.TEST_API_SECRET_KEY)


@pytest.fixture
def admin_password():
    """Plain-text admin password matching the test digest."""
    return settings.TEST_ADMIN_PASSWORD


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def signed_post(api_client, signer):
    """Post a signed envelope to a client route."""

    def post(path, payload, sign=True):
        body = signer.sign_envelope(payload) if sign else payload
        return api_client.post(path, body, format="json")

    return post


@pytest.fixture
def admin_post(api_client, admin_password):
    """Post to an admin route with the admin password."""

    def post(path, payload=None, password=None):
        body = dict(payload or {})
        body["adminPassword"] = admin_password if password is None else password
        return api_client.post(path, body, format="json")

    return post
