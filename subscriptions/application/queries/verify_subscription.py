"""
VerifySubscriptionQuery.

Query to check whether a subject's subscription is active.
"""
from dataclasses import dataclass


@dataclass
class VerifySubscriptionQuery:
    """Query for a subject's subscription state."""

    product_scope: str
    subject_id: str
