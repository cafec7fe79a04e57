"""
Subscription domain services.

The state machine applies subscribe / verify / renew / cancel transitions
against a SubscriptionStore. States are derived on read, never stored:
no document means no subscription, otherwise the expiry date is compared
with today.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, List, Optional

from core.domain.exceptions import (
    CorruptRecordError,
    InvalidDurationError,
    SubscriptionNotFoundError,
)
from core.domain.value_objects import SubscriptionState
from subscriptions.domain.subscription import (
    EPOCH,
    MAX_DURATION_DAYS,
    Subscription,
    validate_duration,
)
from subscriptions.ports.subscription_store import SubscriptionStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SubscriptionStatus:
    """Outcome of a verification."""

    state: SubscriptionState
    expires_on: Optional[date] = None

    @property
    def is_active(self) -> bool:
        """True when the subscription is currently usable."""
        return self.state == SubscriptionState.ACTIVE


@dataclass(frozen=True)
class SubscriptionSummary:
    """One row of a scope listing."""

    subject_id: str
    expires_on: date
    state: SubscriptionState
    created_at: Optional[datetime]


@dataclass(frozen=True)
class SubscriptionStats:
    """Counts for one scan of a scope; total == active + expired."""

    total: int
    active: int
    expired: int


class SubscriptionStateMachine:
    """
    Domain service for the subscription lifecycle.

    Args:
        store: Document store adapter
        clock: Returns the current UTC time
        max_duration_days: Upper bound for subscribe/renew durations
    """

    def __init__(
        self,
        store: SubscriptionStore,
        clock: Clock = utc_now,
        max_duration_days: int = MAX_DURATION_DAYS,
    ):
        self.store = store
        self.clock = clock
        self.max_duration_days = max_duration_days

    def today(self) -> date:
        """Current calendar date according to the clock."""
        return self.clock().date()

    def _check_duration(self, duration_days: int) -> int:
        try:
            return validate_duration(duration_days, self.max_duration_days)
        except ValueError as e:
            raise InvalidDurationError(str(e)) from e

    async def subscribe(self, scope: str, subject_id: str, duration_days: int) -> Subscription:
        """
        Create or overwrite a subscription.

        Args:
            scope: Product scope
            subject_id: Normalized subject id
            duration_days: Days granted from today

        Returns:
            The stored Subscription
        """
        duration_days = self._check_duration(duration_days)
        subscription = Subscription.create(subject_id, duration_days, now=self.clock())
        await self.store.put(scope, subject_id, subscription.to_document())
        logger.info(
            "Subscription created for %s in %s: %s days (expires %s)",
            subject_id,
            scope,
            duration_days,
            subscription.expires_on,
        )
        return subscription

    async def get(self, scope: str, subject_id: str) -> Optional[Subscription]:
        """Load a subscription, or None if absent."""
        document = await self.store.get(scope, subject_id)
        if document is None:
            return None
        return Subscription.from_document(subject_id, document)

    async def verify(self, scope: str, subject_id: str) -> SubscriptionStatus:
        """
        Derive the current state of a subject's subscription.

        Args:
            scope: Product scope
            subject_id: Normalized subject id

        Returns:
            SubscriptionStatus (NONE, ACTIVE or EXPIRED)
        """
        subscription = await self.get(scope, subject_id)
        if subscription is None:
            return SubscriptionStatus(state=SubscriptionState.NONE)
        return SubscriptionStatus(
            state=subscription.state(self.today()),
            expires_on=subscription.expires_on,
        )

    async def renew(self, scope: str, subject_id: str, duration_days: int) -> Subscription:
        """
        Extend an existing subscription from its current expiry.

        The read and the patch are separate store calls; concurrent renewals
        of the same subject are last-write-wins.

        Args:
            scope: Product scope
            subject_id: Normalized subject id
            duration_days: Days added to the current expiry

        Returns:
            The renewed Subscription

        Raises:
            SubscriptionNotFoundError: If the subject has no subscription
            InvalidDurationError: If the new expiry is out of the date range
            CorruptRecordError: If the stored document is unreadable
        """
        duration_days = self._check_duration(duration_days)
        subscription = await self.get(scope, subject_id)
        if subscription is None:
            raise SubscriptionNotFoundError(f"No subscription to renew for {subject_id}")

        try:
            renewed = subscription.renew(duration_days, now=self.clock())
        except OverflowError as e:
            raise InvalidDurationError(
                "Renewal would move the expiry past the supported date range"
            ) from e
        if not await self.store.patch(scope, subject_id, renewed.renewal_fields()):
            raise SubscriptionNotFoundError(f"No subscription to renew for {subject_id}")
        logger.info(
            "Subscription renewed for %s in %s: %s -> %s",
            subject_id,
            scope,
            subscription.expires_on,
            renewed.expires_on,
        )
        return renewed

    async def cancel(self, scope: str, subject_id: str) -> None:
        """
        Delete a subscription permanently.

        Raises:
            SubscriptionNotFoundError: If the subject has no subscription
        """
        if not await self.store.delete(scope, subject_id):
            raise SubscriptionNotFoundError(f"No subscription to cancel for {subject_id}")
        logger.info("Subscription cancelled for %s in %s", subject_id, scope)

    async def _scan_readable(self, scope: str) -> List[Subscription]:
        """Scan a scope, skipping documents that cannot be read."""
        subscriptions = []
        for subject_id, document in await self.store.scan(scope):
            try:
                subscriptions.append(Subscription.from_document(subject_id, document))
            except CorruptRecordError as e:
                logger.warning("Skipping unreadable subscription in %s: %s", scope, e.message)
        return subscriptions

    async def list_all(self, scope: str) -> List[SubscriptionSummary]:
        """
        List every subscription in a scope with its derived state.

        Today is captured once for the whole scan. Unreadable documents
        are logged and left out.
        """
        today = self.today()
        return [
            SubscriptionSummary(
                subject_id=subscription.subject_id,
                expires_on=subscription.expires_on,
                state=subscription.state(today),
                created_at=subscription.created_at if subscription.created_at != EPOCH else None,
            )
            for subscription in await self._scan_readable(scope)
        ]

    async def stats(self, scope: str) -> SubscriptionStats:
        """Count total, active and expired subscriptions in one scan."""
        today = self.today()
        active = expired = 0
        for subscription in await self._scan_readable(scope):
            if subscription.is_expired(today):
                expired += 1
            else:
                active += 1
        return SubscriptionStats(total=active + expired, active=active, expired=expired)
