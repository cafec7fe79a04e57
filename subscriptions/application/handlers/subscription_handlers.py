"""
Subscription handlers.

Handlers for subscribe, verify, renew, cancel, list and stats. Each handler
is the operation boundary: domain outcomes and per-request failures are
converted into a normalized DTO instead of propagating.
"""
import logging

from django.utils.translation import gettext as _

from core.domain.exceptions import StoreError, SubscriptionNotFoundError
from core.domain.value_objects import ResultCode, SubscriptionState
from core.metrics import (
    errors_total,
    subscription_verifications_total,
    subscriptions_cancelled_total,
    subscriptions_created_total,
    subscriptions_renewed_total,
)
from subscriptions.application.commands.cancel_subscription import CancelSubscriptionCommand
from subscriptions.application.commands.renew_subscription import RenewSubscriptionCommand
from subscriptions.application.commands.subscribe import SubscribeCommand
from subscriptions.application.dto.subscription_dto import (
    SubscriptionListDTO,
    SubscriptionListItemDTO,
    SubscriptionResultDTO,
    SubscriptionStatsDTO,
)
from subscriptions.application.queries.list_subscriptions import (
    ListSubscriptionsQuery,
    SubscriptionStatsQuery,
)
from subscriptions.application.queries.verify_subscription import VerifySubscriptionQuery
from subscriptions.domain.services import SubscriptionStateMachine

logger = logging.getLogger(__name__)


def _store_error(operation: str, scope: str, error: StoreError, message: str):
    logger.error("Store failure during %s in %s: %s", operation, scope, error.message)
    errors_total.labels(error_type=error.code.lower(), endpoint=operation).inc()
    return SubscriptionResultDTO(success=False, code=ResultCode.ERROR, message=message)


class SubscribeHandler:
    """Handler for SubscribeCommand."""

    def __init__(self, state_machine: SubscriptionStateMachine):
        """Initialize handler with the state machine."""
        self.state_machine = state_machine

    async def handle(self, command: SubscribeCommand) -> SubscriptionResultDTO:
        """
        Handle subscribe command.

        Args:
            command: SubscribeCommand

        Returns:
            SUBSCRIBED result carrying the new expiry, or ERROR
        """
        try:
            subscription = await self.state_machine.subscribe(
                command.product_scope, command.subject_id, command.duration_days
            )
        except StoreError as e:
            return _store_error(
                "subscribe",
                command.product_scope,
                e,
                _("An error occurred while creating the subscription."),
            )

        subscriptions_created_total.labels(product_scope=command.product_scope).inc()
        return SubscriptionResultDTO(
            success=True,
            code=ResultCode.SUBSCRIBED,
            message=_("The subscription has been created."),
            expires=subscription.expires_on,
        )


class VerifySubscriptionHandler:
    """Handler for VerifySubscriptionQuery."""

    def __init__(self, state_machine: SubscriptionStateMachine):
        """Initialize handler with the state machine."""
        self.state_machine = state_machine

    async def handle(self, query: VerifySubscriptionQuery) -> SubscriptionResultDTO:
        """
        Handle verify query.

        Returns:
            ACTIVE (success, with expiry), EXPIRED, NO_SUBSCRIPTION or ERROR
        """
        try:
            status = await self.state_machine.verify(query.product_scope, query.subject_id)
        except StoreError as e:
            return _store_error(
                "verify",
                query.product_scope,
                e,
                _("An error occurred while checking the subscription."),
            )

        subscription_verifications_total.labels(
            product_scope=query.product_scope, result=status.state.value
        ).inc()

        if status.state == SubscriptionState.NONE:
            return SubscriptionResultDTO(
                success=False,
                code=ResultCode.NO_SUBSCRIPTION,
                message=_("No subscription found."),
            )
        if status.state == SubscriptionState.EXPIRED:
            return SubscriptionResultDTO(
                success=False,
                code=ResultCode.EXPIRED,
                message=_("The subscription has expired."),
                expires=status.expires_on,
            )
        return SubscriptionResultDTO(
            success=True,
            code=ResultCode.ACTIVE,
            message=_("The subscription is active."),
            expires=status.expires_on,
        )


class RenewSubscriptionHandler:
    """Handler for RenewSubscriptionCommand."""

    def __init__(self, state_machine: SubscriptionStateMachine):
        """Initialize handler with the state machine."""
        self.state_machine = state_machine

    async def handle(self, command: RenewSubscriptionCommand) -> SubscriptionResultDTO:
        """
        Handle renew command.

        Returns:
            RENEWED result carrying the new expiry, NOT_FOUND or ERROR
        """
        try:
            renewed = await self.state_machine.renew(
                command.product_scope, command.subject_id, command.duration_days
            )
        except SubscriptionNotFoundError:
            return SubscriptionResultDTO(
                success=False,
                code=ResultCode.NOT_FOUND,
                message=_("There is no subscription to renew."),
            )
        except StoreError as e:
            return _store_error(
                "renew",
                command.product_scope,
                e,
                _("An error occurred while renewing the subscription."),
            )

        subscriptions_renewed_total.labels(product_scope=command.product_scope).inc()
        return SubscriptionResultDTO(
            success=True,
            code=ResultCode.RENEWED,
            message=_("The subscription has been renewed."),
            expires=renewed.expires_on,
        )


class CancelSubscriptionHandler:
    """Handler for CancelSubscriptionCommand."""

    def __init__(self, state_machine: SubscriptionStateMachine):
        """Initialize handler with the state machine."""
        self.state_machine = state_machine

    async def handle(self, command: CancelSubscriptionCommand) -> SubscriptionResultDTO:
        """
        Handle cancel command.

        Returns:
            CANCELLED, NOT_FOUND or ERROR
        """
        try:
            await self.state_machine.cancel(command.product_scope, command.subject_id)
        except SubscriptionNotFoundError:
            return SubscriptionResultDTO(
                success=False,
                code=ResultCode.NOT_FOUND,
                message=_("There is no subscription to cancel."),
            )
        except StoreError as e:
            return _store_error(
                "cancel",
                command.product_scope,
                e,
                _("An error occurred while cancelling the subscription."),
            )

        subscriptions_cancelled_total.labels(product_scope=command.product_scope).inc()
        return SubscriptionResultDTO(
            success=True,
            code=ResultCode.CANCELLED,
            message=_("The subscription has been cancelled."),
        )


class ListSubscriptionsHandler:
    """Handler for ListSubscriptionsQuery."""

    def __init__(self, state_machine: SubscriptionStateMachine):
        """Initialize handler with the state machine."""
        self.state_machine = state_machine

    async def handle(self, query: ListSubscriptionsQuery) -> SubscriptionListDTO:
        """Handle list query."""
        try:
            summaries = await self.state_machine.list_all(query.product_scope)
        except StoreError as e:
            failure = _store_error(
                "list",
                query.product_scope,
                e,
                _("An error occurred while listing subscriptions."),
            )
            return SubscriptionListDTO(
                success=False, code=failure.code, message=failure.message
            )

        return SubscriptionListDTO(
            success=True,
            code=ResultCode.OK,
            message=_("Subscription list retrieved."),
            subscriptions=[
                SubscriptionListItemDTO(
                    username=summary.subject_id,
                    expires=summary.expires_on,
                    status=summary.state.value,
                    created_at=summary.created_at,
                )
                for summary in summaries
            ],
        )


class SubscriptionStatsHandler:
    """Handler for SubscriptionStatsQuery."""

    def __init__(self, state_machine: SubscriptionStateMachine):
        """Initialize handler with the state machine."""
        self.state_machine = state_machine

    async def handle(self, query: SubscriptionStatsQuery) -> SubscriptionStatsDTO:
        """Handle stats query."""
        try:
            stats = await self.state_machine.stats(query.product_scope)
        except StoreError as e:
            failure = _store_error(
                "stats",
                query.product_scope,
                e,
                _("An error occurred while computing subscription statistics."),
            )
            return SubscriptionStatsDTO(
                success=False, code=failure.code, message=failure.message
            )

        return SubscriptionStatsDTO(
            success=True,
            code=ResultCode.OK,
            message=_("Subscription statistics retrieved."),
            total=stats.total,
            active=stats.active,
            expired=stats.expired,
        )
