"""
Django management command to report subscription statistics.

Reads a product scope straight from the database, so it runs without the
API secrets.
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from core.config import product_scopes
from core.domain.exceptions import StoreUnavailableError
from subscriptions.domain.services import SubscriptionStateMachine
from subscriptions.infrastructure.repositories.django_subscription_store import (
    DjangoSubscriptionStore,
)


class Command(BaseCommand):
    """Command to print total/active/expired counts for a product scope."""

    help = "Report subscription statistics for a product scope"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--scope",
            default="default",
            help="Product scope to report on (default: %(default)s)",
        )
        parser.add_argument(
            "--list",
            action="store_true",
            help="Also list every subscription in the scope",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        scope = options["scope"]
        scopes = product_scopes()
        if scope not in scopes:
            raise CommandError(
                f"Unknown product scope '{scope}'. Configured: {', '.join(sorted(scopes))}"
            )

        state_machine = SubscriptionStateMachine(
            DjangoSubscriptionStore(scopes),
            max_duration_days=getattr(settings, "SUBSCRIPTION_MAX_DURATION_DAYS", 3650),
        )

        try:
            if options["list"]:
                summaries = async_to_sync(state_machine.list_all)(scope)
            stats = async_to_sync(state_machine.stats)(scope)
        except StoreUnavailableError as e:
            raise CommandError(e.message) from e

        self.stdout.write(f"Product scope: {scope} (collection {scopes[scope]})")
        self.stdout.write(f"  total:   {stats.total}")
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"  active:  {stats.active}"))
        self.stdout.write(self.style.WARNING(f"  expired: {stats.expired}"))

        if options["list"]:
            self.stdout.write("")
            for summary in summaries:
                self.stdout.write(
                    f"  {summary.subject_id:<40} {summary.expires_on.isoformat()}  {summary.state}"
                )
