"""
SubscribeCommand.

Command to create or overwrite a subscription.
"""
from dataclasses import dataclass


@dataclass
class SubscribeCommand:
    """Command to subscribe a subject for a number of days."""

    product_scope: str
    subject_id: str
    duration_days: int
