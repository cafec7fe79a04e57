"""
RenewSubscriptionCommand.

Command to extend an existing subscription from its current expiry.
"""
from dataclasses import dataclass


@dataclass
class RenewSubscriptionCommand:
    """Command to renew a subscription by a number of days."""

    product_scope: str
    subject_id: str
    duration_days: int
