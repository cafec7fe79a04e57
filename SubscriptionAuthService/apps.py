"""
App configuration for Subscription Auth Service.
"""
import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class SubscriptionAuthServiceConfig(AppConfig):
    """App configuration for SubscriptionAuthService."""

    name = "SubscriptionAuthService"
    verbose_name = "Subscription Auth Service"

    def ready(self):
        """Set up tracing once the app registry is loaded."""
        # Skip for management commands that never serve traffic
        if len(sys.argv) > 1 and sys.argv[1] in [
            "migrate",
            "makemigrations",
            "collectstatic",
            "shell",
            "check",
            "createsuperuser",
            "generate_credentials",
        ]:
            return

        # Django's autoreloader parent process
        if os.environ.get("RUN_MAIN") == "false":
            return

        if getattr(self, "_initialized", False):
            return

        from core.instrumentation import setup_opentelemetry

        logger.info("Setting up observability...")
        setup_opentelemetry()
        self._initialized = True
