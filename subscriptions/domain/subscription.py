"""
Subscription domain entity.

This is the core domain entity representing one subject's subscription
inside a product scope. It contains the expiry arithmetic and is
independent of infrastructure.
"""
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional

from core.domain.exceptions import CorruptRecordError
from core.domain.value_objects import SubscriptionState

MIN_DURATION_DAYS = 1
MAX_DURATION_DAYS = 3650


def validate_duration(duration_days: Any, max_days: int = MAX_DURATION_DAYS) -> int:
    """
    Check a duration in days.

    Args:
        duration_days: Candidate duration
        max_days: Upper bound (inclusive)

    Returns:
        The duration as int

    Raises:
        ValueError: If not an integer within [1, max_days]
    """
    if isinstance(duration_days, bool) or not isinstance(duration_days, int):
        raise ValueError("Duration must be an integer number of days")
    if not MIN_DURATION_DAYS <= duration_days <= max_days:
        raise ValueError(
            f"Duration must be between {MIN_DURATION_DAYS} and {max_days} days"
        )
    return duration_days


@dataclass(frozen=True)
class Subscription:
    """
    Subscription domain entity.

    ``expires_on`` is always a reference date plus ``duration_days``:
    today when created, the previous expiry when renewed.
    """

    subject_id: str
    expires_on: date
    created_at: datetime
    duration_days: int
    renewed_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate subscription entity."""
        if not self.subject_id:
            raise ValueError("Subject ID is required")
        if self.duration_days < MIN_DURATION_DAYS:
            raise ValueError("Duration must be at least 1 day")

    @classmethod
    def create(
        cls, subject_id: str, duration_days: int, now: Optional[datetime] = None
    ) -> "Subscription":
        """
        Create a new Subscription starting today.

        Args:
            subject_id: Normalized subject id
            duration_days: Number of days granted
            now: Current time (defaults to UTC now)

        Returns:
            Subscription entity instance
        """
        now = now or datetime.now(timezone.utc)
        return cls(
            subject_id=subject_id,
            expires_on=now.date() + timedelta(days=duration_days),
            created_at=now,
            duration_days=duration_days,
        )

    def renew(self, duration_days: int, now: Optional[datetime] = None) -> "Subscription":
        """
        Extend the subscription from its current expiry date.

        Expired subscriptions are extended from the old expiry as well,
        so the result may still be in the past.

        Args:
            duration_days: Number of days to add
            now: Current time (defaults to UTC now)

        Returns:
            New Subscription instance
        """
        return replace(
            self,
            expires_on=self.expires_on + timedelta(days=duration_days),
            duration_days=duration_days,
            renewed_at=now or datetime.now(timezone.utc),
        )

    def is_expired(self, today: date) -> bool:
        """Expired only once today is strictly after the expiry date."""
        return today > self.expires_on

    def state(self, today: date) -> SubscriptionState:
        """Derive the subscription state for a given day."""
        if self.is_expired(today):
            return SubscriptionState.EXPIRED
        return SubscriptionState.ACTIVE

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the stored document shape."""
        return {
            "username": self.subject_id,
            "expires": self.expires_on.isoformat(),
            "createdAt": self.created_at.isoformat(),
            "renewedAt": self.renewed_at.isoformat() if self.renewed_at else None,
            "duration": self.duration_days,
        }

    def renewal_fields(self) -> Dict[str, Any]:
        """Fields patched into the stored document on renewal."""
        return {
            "expires": self.expires_on.isoformat(),
            "renewedAt": self.renewed_at.isoformat() if self.renewed_at else None,
            "duration": self.duration_days,
        }

    @classmethod
    def from_document(cls, subject_id: str, document: Dict[str, Any]) -> "Subscription":
        """
        Rebuild an entity from a stored document.

        Documents written by older clients may carry ``lastRenewalDuration``
        and lack ``duration`` or ``createdAt``.

        Args:
            subject_id: Document key
            document: Stored fields

        Returns:
            Subscription entity

        Raises:
            CorruptRecordError: If the document lacks a usable expiry or duration
        """
        try:
            duration = document.get("duration") or document.get("lastRenewalDuration") or 1
            return cls(
                subject_id=document.get("username") or subject_id,
                expires_on=parse_date(document["expires"]),
                created_at=parse_timestamp(document.get("createdAt")) or EPOCH,
                duration_days=int(duration),
                renewed_at=parse_timestamp(document.get("renewedAt")),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise CorruptRecordError(
                f"Stored subscription {subject_id} is unreadable ({type(e).__name__}: {e})"
            ) from e


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_date(value: Any) -> date:
    """Parse a stored ``YYYY-MM-DD`` value (a longer ISO string is cut to its date)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a stored ISO-8601 timestamp; returns None when absent or unparseable."""
    if not value or value == "N/A":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
