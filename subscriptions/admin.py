"""
Django admin configuration for subscriptions app.
"""
from django.contrib import admin
from django.utils import timezone

from subscriptions.domain.subscription import parse_date
from subscriptions.infrastructure.models import SubscriptionDocument


@admin.register(SubscriptionDocument)
class SubscriptionDocumentAdmin(admin.ModelAdmin):
    """Admin interface for SubscriptionDocument model."""

    list_display = [
        "document_id",
        "collection",
        "expires",
        "status",
        "updated_at",
    ]
    list_filter = ["collection", "created_at", "updated_at"]
    search_fields = ["document_id"]
    readonly_fields = ["id", "created_at", "updated_at"]
    fieldsets = (
        (
            "Document",
            {
                "fields": ("id", "collection", "document_id", "data"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    @admin.display(description="Expires")
    def expires(self, obj):
        """Expiry date stored in the document."""
        return obj.data.get("expires", "-")

    @admin.display(description="Status")
    def status(self, obj):
        """Derived status: expired only after the expiry day has passed."""
        raw = obj.data.get("expires")
        if not raw:
            return "-"
        try:
            expires = parse_date(raw)
        except ValueError:
            return "invalid"
        return "expired" if timezone.now().date() > expires else "active"
