"""
ListSubscriptionsQuery and SubscriptionStatsQuery.

Full-scan queries over one product scope.
"""
from dataclasses import dataclass


@dataclass
class ListSubscriptionsQuery:
    """Query to list every subscription in a scope."""

    product_scope: str


@dataclass
class SubscriptionStatsQuery:
    """Query for total/active/expired counts in a scope."""

    product_scope: str
