"""
Unit tests for Subscription entity.
"""
from datetime import date, datetime, timezone

import pytest

from core.domain.value_objects import SubscriptionState
from subscriptions.domain.subscription import (
    EPOCH,
    Subscription,
    parse_timestamp,
    validate_duration,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestSubscriptionEntity:
    """Tests for Subscription entity."""

    def test_create_expires_duration_days_from_today(self):
        """A new subscription expires duration days after today."""
        subscription = Subscription.create("user@example.com", 30, now=NOW)
        assert subscription.expires_on == date(2024, 7, 1)
        assert subscription.created_at == NOW
        assert subscription.renewed_at is None

    def test_renew_extends_from_current_expiry(self):
        """Renewal counts from the old expiry, not from today."""
        subscription = Subscription.create("user@example.com", 30, now=NOW)
        renewed = subscription.renew(30, now=NOW)
        assert renewed.expires_on == date(2024, 7, 31)
        assert renewed.renewed_at == NOW
        assert renewed.created_at == subscription.created_at

    def test_renew_expired_subscription_keeps_grace_arithmetic(self):
        """An expired subscription renewed late may still be expired."""
        subscription = Subscription(
            subject_id="user@example.com",
            expires_on=date(2024, 1, 1),
            created_at=EPOCH,
            duration_days=30,
        )
        renewed = subscription.renew(30, now=NOW)
        assert renewed.expires_on == date(2024, 1, 31)
        assert renewed.state(NOW.date()) == SubscriptionState.EXPIRED

    def test_expiry_day_is_still_active(self):
        """Expired only strictly after the expiry date."""
        subscription = Subscription.create("user@example.com", 1, now=NOW)
        assert subscription.state(date(2024, 6, 2)) == SubscriptionState.ACTIVE
        assert subscription.state(date(2024, 6, 3)) == SubscriptionState.EXPIRED

    def test_requires_subject(self):
        """Subject id is mandatory."""
        with pytest.raises(ValueError):
            Subscription(
                subject_id="", expires_on=date(2024, 1, 1), created_at=NOW, duration_days=1
            )


class TestDocumentMapping:
    """Tests for stored document conversion."""

    def test_to_document_shape(self):
        """Documents use the stored field names."""
        document = Subscription.create("user@example.com", 30, now=NOW).to_document()
        assert document == {
            "username": "user@example.com",
            "expires": "2024-07-01",
            "createdAt": "2024-06-01T12:00:00+00:00",
            "renewedAt": None,
            "duration": 30,
        }

    def test_from_document_accepts_legacy_fields(self):
        """lastRenewalDuration is read as the duration; createdAt may be absent."""
        subscription = Subscription.from_document(
            "user@example.com",
            {"expires": "2024-07-01", "lastRenewalDuration": 90, "renewedAt": "N/A"},
        )
        assert subscription.duration_days == 90
        assert subscription.created_at == EPOCH
        assert subscription.renewed_at is None
        assert subscription.subject_id == "user@example.com"

    def test_renewal_fields(self):
        """Only expiry, renewal time and duration are patched."""
        renewed = Subscription.create("user@example.com", 30, now=NOW).renew(90, now=NOW)
        assert renewed.renewal_fields() == {
            "expires": "2024-09-29",
            "renewedAt": "2024-06-01T12:00:00+00:00",
            "duration": 90,
        }


class TestValidateDuration:
    """Tests for duration bounds."""

    @pytest.mark.parametrize("days", [1, 30, 3650])
    def test_valid(self, days):
        """Bounds are inclusive."""
        assert validate_duration(days) == days

    @pytest.mark.parametrize("days", [0, -5, 3651, "30", 30.0, True, None])
    def test_invalid(self, days):
        """Out of range and non-integer durations are rejected."""
        with pytest.raises(ValueError):
            validate_duration(days)


def test_parse_timestamp_handles_zulu_suffix():
    """Z-suffixed timestamps parse as UTC."""
    assert parse_timestamp("2024-06-01T12:00:00.000Z") == NOW
