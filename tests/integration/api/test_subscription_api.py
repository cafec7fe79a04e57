"""
Integration tests for the client subscription API.
"""
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from authentication.domain.signing import RequestSigner, current_time_ms
from core.domain.exceptions import StoreUnavailableError
from subscriptions.container import get_container
from subscriptions.infrastructure.models import SubscriptionDocument
from subscriptions.ports.subscription_store import SubscriptionStore

SUBJECT = "user@example.com"


def _today():
    return datetime.now(timezone.utc).date()


class DownStore(SubscriptionStore):
    """Store that is unreachable."""

    async def get(self, scope, subject_id):
        raise StoreUnavailableError("database is down")

    async def put(self, scope, subject_id, document):
        raise StoreUnavailableError("database is down")

    async def patch(self, scope, subject_id, fields):
        raise StoreUnavailableError("database is down")

    async def delete(self, scope, subject_id):
        raise StoreUnavailableError("database is down")

    async def scan(self, scope):
        raise StoreUnavailableError("database is down")


@pytest.mark.django_db
@pytest.mark.integration
class TestSubscriptionLifecycleAPI:
    """End-to-end lifecycle through the client routes."""

    def test_full_lifecycle(self, signed_post):
        """Subscribe, verify, renew, cancel, verify."""
        response = signed_post("/api/subscribe", {"username": SUBJECT, "plan": "basic"})
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "code": "SUBSCRIBED",
            "message": "The subscription has been created.",
            "expires": (_today() + timedelta(days=30)).isoformat(),
        }

        response = signed_post("/api/verify", {"username": SUBJECT})
        assert response.status_code == 200
        assert response.json()["code"] == "ACTIVE"
        assert response.json()["success"] is True

        response = signed_post("/api/renew", {"username": SUBJECT})
        assert response.json()["code"] == "RENEWED"
        assert response.json()["expires"] == (_today() + timedelta(days=60)).isoformat()

        response = signed_post("/api/cancel", {"username": SUBJECT})
        assert response.json()["code"] == "CANCELLED"

        response = signed_post("/api/verify", {"username": SUBJECT})
        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["code"] == "NO_SUBSCRIPTION"
        assert "expires" not in response.json()

    def test_plan_defaults_to_basic(self, signed_post):
        """Subscribing without a plan grants the basic duration."""
        response = signed_post("/api/subscribe", {"username": SUBJECT})
        assert response.status_code == 200
        assert response.json()["code"] == "SUBSCRIBED"
        assert response.json()["expires"] == (_today() + timedelta(days=30)).isoformat()

    def test_premium_plan_is_ninety_days(self, signed_post):
        """Plans map to their configured durations."""
        response = signed_post("/api/subscribe", {"username": SUBJECT, "plan": "premium"})
        assert response.json()["expires"] == (_today() + timedelta(days=90)).isoformat()

    def test_username_is_normalized(self, signed_post):
        """Mixed-case usernames address the same subscription."""
        signed_post("/api/subscribe", {"username": "User@Example.COM", "plan": "basic"})
        response = signed_post("/api/verify", {"username": SUBJECT})
        assert response.json()["code"] == "ACTIVE"
        # pylint: disable=no-member
        assert SubscriptionDocument.objects.filter(document_id=SUBJECT).exists()

    def test_renew_and_cancel_without_subscription(self, signed_post):
        """Business failures are HTTP 200 with success false."""
        renew = signed_post("/api/renew", {"username": SUBJECT})
        cancel = signed_post("/api/cancel", {"username": SUBJECT})

        assert renew.status_code == 200
        assert renew.json()["code"] == "NOT_FOUND"
        assert cancel.status_code == 200
        assert cancel.json()["code"] == "NOT_FOUND"
        # pylint: disable=no-member
        assert not SubscriptionDocument.objects.exists()

    def test_expired_subscription(self, signed_post):
        """A past expiry verifies as EXPIRED with its date."""
        # pylint: disable=no-member
        SubscriptionDocument.objects.create(
            collection="subscriptions",
            document_id=SUBJECT,
            data={"username": SUBJECT, "expires": "2020-01-01", "duration": 30},
        )
        response = signed_post("/api/verify", {"username": SUBJECT})
        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["code"] == "EXPIRED"
        assert response.json()["expires"] == "2020-01-01"

    def test_scoped_routes_are_isolated(self, signed_post):
        """A subscription in one product scope is invisible from another."""
        signed_post("/api/v1/rainbowg/subscribe", {"username": SUBJECT, "plan": "basic"})

        assert signed_post("/api/v1/rainbowg/verify", {"username": SUBJECT}).json()["code"] == (
            "ACTIVE"
        )
        assert signed_post("/api/verify", {"username": SUBJECT}).json()["code"] == (
            "NO_SUBSCRIPTION"
        )

    def test_unknown_scope(self, signed_post):
        """Unconfigured scopes are a validation error."""
        response = signed_post("/api/v1/unknown/verify", {"username": SUBJECT})
        assert response.status_code == 400
        assert response.json()["code"] == "UNKNOWN_PRODUCT_SCOPE"

    def test_unknown_plan(self, signed_post):
        """Plans outside the configured set are rejected."""
        response = signed_post("/api/subscribe", {"username": SUBJECT, "plan": "gold"})
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert response.json()["success"] is False

    def test_store_unavailable_is_generic_500(self, signed_post, monkeypatch):
        """Store outages surface as a generic server error."""
        monkeypatch.setattr(get_container().state_machine, "store", DownStore())
        response = signed_post("/api/verify", {"username": SUBJECT})

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["code"] == "ERROR"
        assert "database is down" not in response.json()["message"]

    def test_unreadable_record_is_generic_500(self, signed_post):
        """A corrupt stored document verifies as ERROR instead of crashing."""
        # pylint: disable=no-member
        SubscriptionDocument.objects.create(
            collection="subscriptions",
            document_id=SUBJECT,
            data={"username": SUBJECT, "expires": "not-a-date"},
        )
        response = signed_post("/api/verify", {"username": SUBJECT})

        assert response.status_code == 500
        assert response.json()["code"] == "ERROR"
        assert "not-a-date" not in response.json()["message"]



@pytest.mark.django_db
@pytest.mark.integration
class TestRequestAuthentication:
    """Signed envelope enforcement on client routes."""

    def test_bad_signature_is_unauthorized(self, api_client):
        """A signature made with the wrong secret yields a bare 401."""
        envelope = RequestSigner("wrong-secret").sign_envelope({"username": SUBJECT})
        response = api_client.post("/api/verify", envelope, format="json")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "code": "UNAUTHORIZED",
            "message": "Unauthorized",
        }

    def test_spaced_signature_is_unauthorized(self, api_client, signer):
        """A valid signature split by whitespace is not accepted."""
        envelope = signer.sign_envelope({"username": SUBJECT})
        signature = envelope["signature"]
        envelope["signature"] = " ".join(signature[i:i + 2] for i in range(0, 64, 2))
        response = api_client.post("/api/verify", envelope, format="json")

        assert response.status_code == 401

    def test_tampered_payload_is_unauthorized(self, api_client, signer):
        """Changing a signed field after signing is detected."""
        envelope = signer.sign_envelope({"username": SUBJECT, "plan": "basic"})
        envelope["plan"] = "premium"
        response = api_client.post("/api/subscribe", envelope, format="json")
        assert response.status_code == 401
        # pylint: disable=no-member
        assert not SubscriptionDocument.objects.exists()

    def test_stale_timestamp_is_rejected(self, api_client, signer):
        """Envelopes older than five minutes are a 400 with the reason."""
        envelope = signer.sign_envelope(
            {"username": SUBJECT}, now_ms=current_time_ms() - 10 * 60 * 1000
        )
        response = api_client.post("/api/verify", envelope, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert "Request timestamp is outside the allowed window" in response.json()["errors"]

    def test_missing_envelope_fields(self, api_client):
        """Every missing field is reported."""
        response = api_client.post("/api/verify", {}, format="json")

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert "Username is required" in errors
        assert "Timestamp is required" in errors
        assert "Signature is required" in errors

    def test_invalid_email(self, signed_post):
        """Usernames must be email-shaped."""
        response = signed_post("/api/verify", {"username": "not-an-email"})
        assert response.status_code == 400
        assert response.json()["errors"] == ["Invalid email format"]

    def test_invalid_json(self, api_client):
        """Bodies that are not JSON objects are rejected."""
        response = api_client.post("/api/verify", "[1, 2]", content_type="application/json")
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_unsigned_requests_when_signing_disabled(self, api_client, monkeypatch):
        """With signing disabled only the username is required."""
        container = get_container()
        monkeypatch.setattr(
            container, "config", replace(container.config, require_signed_requests=False)
        )
        response = api_client.post("/api/verify", {"username": SUBJECT}, format="json")

        assert response.status_code == 200
        assert response.json()["code"] == "NO_SUBSCRIPTION"

    def test_unsigned_requests_still_validate_username(self, api_client, monkeypatch):
        """With signing disabled a missing username is still a 400."""
        container = get_container()
        monkeypatch.setattr(
            container, "config", replace(container.config, require_signed_requests=False)
        )
        response = api_client.post("/api/verify", {}, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert response.json()["errors"] == ["username: This field is required."]
