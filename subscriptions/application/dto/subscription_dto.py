"""
Subscription DTOs for API responses.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from core.domain.value_objects import ResultCode


@dataclass
class SubscriptionResultDTO:
    """
    Normalized result of a subscription operation.

    Callers branch on ``success`` and ``code``; ``message`` is display text.
    """

    success: bool
    code: ResultCode
    message: str
    expires: Optional[date] = None


@dataclass
class SubscriptionListItemDTO:
    """DTO for one row of a subscription listing."""

    username: str
    expires: date
    status: str
    created_at: Optional[datetime]


@dataclass
class SubscriptionListDTO:
    """DTO for a subscription listing."""

    success: bool
    code: ResultCode
    message: str
    subscriptions: List[SubscriptionListItemDTO] = field(default_factory=list)


@dataclass
class SubscriptionStatsDTO:
    """DTO for subscription statistics."""

    success: bool
    code: ResultCode
    message: str
    total: int = 0
    active: int = 0
    expired: int = 0
