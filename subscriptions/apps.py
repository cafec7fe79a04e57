"""
App configuration for subscriptions.
"""
import logging
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)

# Commands that never serve traffic and must run without secrets
SKIP_CONTAINER_COMMANDS = {
    "makemigrations",
    "migrate",
    "collectstatic",
    "generate_credentials",
    "subscription_report",
}


class SubscriptionsConfig(AppConfig):
    """App configuration for the subscriptions app."""

    name = "subscriptions"
    verbose_name = "Subscriptions"
    default_auto_field = "django.db.models.BigAutoField"
    container = None

    def ready(self):
        """
        Build the service container.

        A ConfigurationError raised here aborts startup.
        """
        if len(sys.argv) > 1 and sys.argv[1] in SKIP_CONTAINER_COMMANDS:
            return

        from subscriptions.container import build_container

        self.container = build_container()
        logger.info("Subscription services initialized")
