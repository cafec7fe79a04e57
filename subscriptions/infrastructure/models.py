"""
SubscriptionDocument model.

Subscriptions are kept as schemaless JSON documents addressed by
(collection, document id), one collection per product scope.
"""
from django.db import models


class SubscriptionDocument(models.Model):
    """
    A stored subscription document.

    ``document_id`` is the normalized subject id; ``data`` holds the
    subscription fields (username, expires, createdAt, renewedAt, duration).
    """

    id = models.BigAutoField(primary_key=True)
    collection = models.CharField(max_length=100, db_index=True)
    document_id = models.CharField(max_length=254)
    data = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "subscriptions"
        db_table = "subscription_documents"
        ordering = ["collection", "document_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["collection", "document_id"],
                name="unique_subscription_document",
            ),
        ]

    def __str__(self):
        return f"{self.collection}/{self.document_id}"
