"""
Serializers for the client subscription API.

The signed envelope (``timestamp``, ``signature``) is checked by
RequestAuthenticationMiddleware before these run; the serializers only
validate the operation fields.
"""

from django.conf import settings
from rest_framework import serializers

from core.domain.value_objects import SubjectId

DEFAULT_PLANS = {"basic": 30, "premium": 90}
DEFAULT_PLAN = "basic"


def subscription_plans():
    """Plan name -> duration in days."""
    return dict(getattr(settings, "SUBSCRIPTION_PLANS", DEFAULT_PLANS))


class SubjectField(serializers.CharField):
    """Username field normalized to a SubjectId value."""

    default_error_messages = {"invalid_subject": "Invalid email format"}

    def to_internal_value(self, data):
        """Strip, lower-case and validate the username."""
        value = super().to_internal_value(data)
        try:
            return SubjectId(value).value
        except ValueError:
            self.fail("invalid_subject")


class VerifyRequestSerializer(serializers.Serializer):
    """Serializer for verify request."""

    username = SubjectField(max_length=254)


class SubscribeRequestSerializer(serializers.Serializer):
    """Serializer for client subscribe request."""

    username = SubjectField(max_length=254)
    plan = serializers.CharField(max_length=50, required=False, default=DEFAULT_PLAN)

    def validate_plan(self, value):
        """Resolve the plan name; unknown plans are rejected."""
        if value not in subscription_plans():
            raise serializers.ValidationError(f"Unknown plan: {value}")
        return value


class RenewRequestSerializer(serializers.Serializer):
    """Serializer for client renew request."""

    username = SubjectField(max_length=254)


class CancelRequestSerializer(serializers.Serializer):
    """Serializer for client cancel request."""

    username = SubjectField(max_length=254)


class SubscriptionResultSerializer(serializers.Serializer):
    """Serializer for SubscriptionResultDTO."""

    success = serializers.BooleanField()
    code = serializers.CharField()
    message = serializers.CharField()
    expires = serializers.DateField(required=False)

    def to_representation(self, instance):
        """Render the result; ``expires`` only appears when set."""
        data = {
            "success": instance.success,
            "code": str(instance.code),
            "message": instance.message,
        }
        if instance.expires is not None:
            data["expires"] = instance.expires.isoformat()
        return data
