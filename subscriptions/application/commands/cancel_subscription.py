"""
CancelSubscriptionCommand.

Command to delete a subscription.
"""
from dataclasses import dataclass


@dataclass
class CancelSubscriptionCommand:
    """Command to cancel a subscription."""

    product_scope: str
    subject_id: str
