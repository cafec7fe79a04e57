"""
Model registry for the subscriptions app.

Models live in the infrastructure layer; importing them here lets Django
discover them for migrations and the admin.
"""
from subscriptions.infrastructure.models import SubscriptionDocument  # noqa: F401
