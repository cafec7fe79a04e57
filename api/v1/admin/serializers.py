"""
Serializers for the admin subscription API.

``adminPassword`` is checked by RequestAuthenticationMiddleware; it is
declared here so it shows up in the schema and is never echoed back.
"""

from django.conf import settings
from rest_framework import serializers

from api.v1.subscriptions.serializers import SubjectField
from subscriptions.domain.subscription import MAX_DURATION_DAYS, MIN_DURATION_DAYS


def max_duration_days() -> int:
    """Upper bound for admin-supplied durations."""
    return getattr(settings, "SUBSCRIPTION_MAX_DURATION_DAYS", MAX_DURATION_DAYS)


class AdminRequestSerializer(serializers.Serializer):
    """Base serializer carrying the admin secret."""

    adminPassword = serializers.CharField(write_only=True, trim_whitespace=False)


class AdminDurationField(serializers.IntegerField):
    """Duration in days, bounded by settings."""

    def __init__(self, **kwargs):
        kwargs.setdefault("min_value", MIN_DURATION_DAYS)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        """Reject booleans and durations above the configured bound."""
        if isinstance(data, bool):
            self.fail("invalid")
        value = super().to_internal_value(data)
        if value > max_duration_days():
            self.fail("max_value", max_value=max_duration_days())
        return value


class AdminSubscribeRequestSerializer(AdminRequestSerializer):
    """Serializer for admin subscribe request."""

    username = SubjectField(max_length=254)
    duration = AdminDurationField()


class AdminRenewRequestSerializer(AdminRequestSerializer):
    """Serializer for admin renew request."""

    username = SubjectField(max_length=254)
    duration = AdminDurationField()


class AdminCancelRequestSerializer(AdminRequestSerializer):
    """Serializer for admin cancel request."""

    username = SubjectField(max_length=254)


class SubscriptionListItemSerializer(serializers.Serializer):
    """Serializer for SubscriptionListItemDTO."""

    username = serializers.CharField()
    expires = serializers.DateField()
    status = serializers.CharField()
    createdAt = serializers.DateTimeField(source="created_at", allow_null=True)


class SubscriptionListResponseSerializer(serializers.Serializer):
    """Serializer for SubscriptionListDTO."""

    success = serializers.BooleanField()
    code = serializers.CharField()
    message = serializers.CharField()
    subscriptions = SubscriptionListItemSerializer(many=True)


class SubscriptionStatsResponseSerializer(serializers.Serializer):
    """Serializer for SubscriptionStatsDTO."""

    success = serializers.BooleanField()
    code = serializers.CharField()
    message = serializers.CharField()
    total = serializers.IntegerField()
    active = serializers.IntegerField()
    expired = serializers.IntegerField()
