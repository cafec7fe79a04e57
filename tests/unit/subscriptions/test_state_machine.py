"""
Unit tests for SubscriptionStateMachine.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from core.domain.exceptions import (
    CorruptRecordError,
    InvalidDurationError,
    SubscriptionNotFoundError,
)
from core.domain.value_objects import SubscriptionState
from subscriptions.domain.services import SubscriptionStateMachine

SCOPE = "default"
SUBJECT = "user@example.com"

UNREADABLE_DOCUMENTS = {
    "missing@example.com": {"username": "missing@example.com", "createdAt": "x"},
    "garbled@example.com": {"username": "garbled@example.com", "expires": "not-a-date"},
    "negative@example.com": {
        "username": "negative@example.com",
        "expires": "2024-07-01",
        "duration": -5,
    },
}


class AdvancingClock:
    """Clock that moves forward one hour every time it is read."""

    def __init__(self, start: datetime):
        self.now = start
        self.reads = 0

    def __call__(self) -> datetime:
        current = self.now
        self.reads += 1
        self.now += timedelta(hours=1)
        return current


@pytest.mark.asyncio
class TestSubscribe:
    """Tests for subscribe."""

    async def test_subscribe_creates_active_subscription(self, state_machine):
        """Subscribe then verify yields ACTIVE with the expected expiry."""
        subscription = await state_machine.subscribe(SCOPE, SUBJECT, 30)
        status = await state_machine.verify(SCOPE, SUBJECT)

        assert subscription.expires_on == date(2024, 7, 1)
        assert status.state == SubscriptionState.ACTIVE
        assert status.expires_on == date(2024, 7, 1)
        assert status.is_active is True

    async def test_subscribe_overwrites_existing(self, state_machine, clock):
        """A second subscribe replaces the record rather than extending it."""
        await state_machine.subscribe(SCOPE, SUBJECT, 90)
        clock.set_date(2024, 6, 10)
        await state_machine.subscribe(SCOPE, SUBJECT, 30)

        status = await state_machine.verify(SCOPE, SUBJECT)
        assert status.expires_on == date(2024, 7, 10)

    @pytest.mark.parametrize("days", [0, 3651, -1])
    async def test_subscribe_rejects_out_of_range_duration(self, state_machine, memory_store, days):
        """Durations outside 1..3650 raise and store nothing."""
        with pytest.raises(InvalidDurationError):
            await state_machine.subscribe(SCOPE, SUBJECT, days)
        assert await memory_store.get(SCOPE, SUBJECT) is None

    async def test_scopes_are_isolated(self, state_machine):
        """A subscription in one scope is invisible in another."""
        await state_machine.subscribe("rainbowg", SUBJECT, 30)
        status = await state_machine.verify(SCOPE, SUBJECT)
        assert status.state == SubscriptionState.NONE


@pytest.mark.asyncio
class TestVerify:
    """Tests for verify."""

    async def test_unknown_subject_has_no_subscription(self, state_machine):
        """Absent records verify as NONE without an expiry."""
        status = await state_machine.verify(SCOPE, "nobody@example.com")
        assert status.state == SubscriptionState.NONE
        assert status.expires_on is None

    async def test_expiry_day_is_active(self, state_machine, clock):
        """On the expiry date itself the subscription is still active."""
        await state_machine.subscribe(SCOPE, SUBJECT, 1)
        clock.set_date(2024, 6, 2)
        assert (await state_machine.verify(SCOPE, SUBJECT)).state == SubscriptionState.ACTIVE

    async def test_day_after_expiry_is_expired(self, state_machine, clock):
        """The day after the expiry date the subscription is expired."""
        await state_machine.subscribe(SCOPE, SUBJECT, 1)
        clock.set_date(2024, 6, 3)
        status = await state_machine.verify(SCOPE, SUBJECT)
        assert status.state == SubscriptionState.EXPIRED
        assert status.expires_on == date(2024, 6, 2)

    async def test_unreadable_record_raises(self, state_machine, memory_store):
        """A stored document without an expiry is reported, not guessed."""
        await memory_store.put(SCOPE, SUBJECT, {"username": SUBJECT, "createdAt": "x"})
        with pytest.raises(CorruptRecordError):
            await state_machine.verify(SCOPE, SUBJECT)



@pytest.mark.asyncio
class TestRenew:
    """Tests for renew."""

    async def test_renew_extends_from_current_expiry(self, state_machine):
        """Renewing an active subscription adds to its expiry."""
        await state_machine.subscribe(SCOPE, SUBJECT, 30)
        renewed = await state_machine.renew(SCOPE, SUBJECT, 30)
        assert renewed.expires_on == date(2024, 7, 31)

    async def test_renew_expired_extends_from_old_expiry(self, state_machine, memory_store):
        """Expired on 2024-01-01, renewed on 2024-06-01 for 30 days: 2024-01-31."""
        await memory_store.put(
            SCOPE,
            SUBJECT,
            {"username": SUBJECT, "expires": "2024-01-01", "createdAt": None, "duration": 30},
        )
        renewed = await state_machine.renew(SCOPE, SUBJECT, 30)

        assert renewed.expires_on == date(2024, 1, 31)
        status = await state_machine.verify(SCOPE, SUBJECT)
        assert status.state == SubscriptionState.EXPIRED
        assert status.expires_on == date(2024, 1, 31)

    async def test_renew_patches_in_place(self, state_machine, memory_store):
        """createdAt survives a renewal; renewedAt and duration are updated."""
        await state_machine.subscribe(SCOPE, SUBJECT, 30)
        before = await memory_store.get(SCOPE, SUBJECT)
        await state_machine.renew(SCOPE, SUBJECT, 90)
        after = await memory_store.get(SCOPE, SUBJECT)

        assert after["createdAt"] == before["createdAt"]
        assert after["renewedAt"] == "2024-06-01T12:00:00+00:00"
        assert after["duration"] == 90
        assert after["expires"] == "2024-09-29"

    async def test_renew_absent_raises_and_creates_nothing(self, state_machine, memory_store):
        """Renewing without a subscription fails and does not create one."""
        with pytest.raises(SubscriptionNotFoundError):
            await state_machine.renew(SCOPE, SUBJECT, 30)
        assert await memory_store.get(SCOPE, SUBJECT) is None

    async def test_renew_rejects_invalid_duration(self, state_machine):
        """Renew applies the same duration bounds."""
        await state_machine.subscribe(SCOPE, SUBJECT, 30)
        with pytest.raises(InvalidDurationError):
            await state_machine.renew(SCOPE, SUBJECT, 0)

    async def test_renew_past_last_representable_date(self, state_machine, memory_store):
        """An expiry pushed beyond the calendar is an invalid duration, not a crash."""
        await memory_store.put(
            SCOPE, SUBJECT, {"username": SUBJECT, "expires": "9999-01-01", "duration": 30}
        )
        with pytest.raises(InvalidDurationError):
            await state_machine.renew(SCOPE, SUBJECT, 3650)
        assert (await memory_store.get(SCOPE, SUBJECT))["expires"] == "9999-01-01"



@pytest.mark.asyncio
class TestCancel:
    """Tests for cancel."""

    async def test_cancel_deletes_record(self, state_machine):
        """After cancel, verify reports no subscription."""
        await state_machine.subscribe(SCOPE, SUBJECT, 30)
        await state_machine.cancel(SCOPE, SUBJECT)
        assert (await state_machine.verify(SCOPE, SUBJECT)).state == SubscriptionState.NONE

    async def test_cancel_absent_raises(self, state_machine):
        """Cancelling twice reports not found the second time."""
        await state_machine.subscribe(SCOPE, SUBJECT, 30)
        await state_machine.cancel(SCOPE, SUBJECT)
        with pytest.raises(SubscriptionNotFoundError):
            await state_machine.cancel(SCOPE, SUBJECT)


@pytest.mark.asyncio
class TestListAndStats:
    """Tests for list_all and stats."""

    async def _populate(self, state_machine, clock):
        clock.set_date(2024, 5, 1)
        await state_machine.subscribe(SCOPE, "old@example.com", 10)
        clock.set_date(2024, 6, 1)
        await state_machine.subscribe(SCOPE, "new@example.com", 30)
        await state_machine.subscribe(SCOPE, "edge@example.com", 1)
        clock.set_date(2024, 6, 2)

    async def test_list_all_derives_state(self, state_machine, clock):
        """Each row carries its derived state."""
        await self._populate(state_machine, clock)
        summaries = {s.subject_id: s for s in await state_machine.list_all(SCOPE)}

        assert summaries["old@example.com"].state == SubscriptionState.EXPIRED
        assert summaries["new@example.com"].state == SubscriptionState.ACTIVE
        assert summaries["edge@example.com"].state == SubscriptionState.ACTIVE
        assert summaries["new@example.com"].expires_on == date(2024, 7, 1)

    async def test_stats_total_is_active_plus_expired(self, state_machine, clock):
        """Counts partition the scope."""
        await self._populate(state_machine, clock)
        stats = await state_machine.stats(SCOPE)

        assert stats.total == 3
        assert stats.active == 2
        assert stats.expired == 1
        assert stats.total == stats.active + stats.expired

    async def test_empty_scope(self, state_machine):
        """An empty scope has zero counts."""
        stats = await state_machine.stats(SCOPE)
        assert (stats.total, stats.active, stats.expired) == (0, 0, 0)
        assert await state_machine.list_all(SCOPE) == []

    async def test_unreadable_documents_are_skipped(self, state_machine, memory_store, clock):
        """One bad document does not abort the scan of the whole scope."""
        await self._populate(state_machine, clock)
        for subject_id, document in UNREADABLE_DOCUMENTS.items():
            await memory_store.put(SCOPE, subject_id, document)

        stats = await state_machine.stats(SCOPE)
        summaries = await state_machine.list_all(SCOPE)

        assert (stats.total, stats.active, stats.expired) == (3, 2, 1)
        assert sorted(s.subject_id for s in summaries) == [
            "edge@example.com",
            "new@example.com",
            "old@example.com",
        ]

    async def test_clock_is_read_once_per_scan(self, memory_store):
        """A scan crossing midnight classifies every row against the same day."""
        for index in range(3):
            await memory_store.put(
                SCOPE,
                f"user{index}@example.com",
                {"username": f"user{index}@example.com", "expires": "2024-06-01", "duration": 1},
            )

        clock = AdvancingClock(datetime(2024, 6, 1, 23, 30, tzinfo=timezone.utc))
        stats = await SubscriptionStateMachine(memory_store, clock=clock).stats(SCOPE)
        assert clock.reads == 1
        assert (stats.active, stats.expired) == (3, 0)

        clock = AdvancingClock(datetime(2024, 6, 1, 23, 30, tzinfo=timezone.utc))
        summaries = await SubscriptionStateMachine(memory_store, clock=clock).list_all(SCOPE)
        assert clock.reads == 1
        assert {s.state for s in summaries} == {SubscriptionState.ACTIVE}

