"""
Django management command to generate service credentials.

Prints a fresh API signing secret and the digest to store in
ADMIN_PASSWORD_HASH. Nothing is written to disk.
"""

import getpass

from django.core.management.base import BaseCommand, CommandError

from authentication.domain.credentials import generate_api_secret, make_admin_digest


class Command(BaseCommand):
    """Command to generate API_SECRET_KEY and ADMIN_PASSWORD_HASH values."""

    help = "Generate an API signing secret and an admin password digest"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--password",
            help="Admin password to digest (prompted for if omitted)",
        )
        parser.add_argument(
            "--hardened",
            action="store_true",
            help="Use Django's salted password hasher instead of plain SHA-256",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        password = options["password"]
        if password is None:
            password = getpass.getpass("Admin password: ")
            if password != getpass.getpass("Repeat admin password: "):
                raise CommandError("Passwords do not match")
        if not password:
            raise CommandError("Admin password cannot be empty")

        digest = make_admin_digest(password, hardened=options["hardened"])

        self.stdout.write(f"API_SECRET_KEY={generate_api_secret()}")
        self.stdout.write(f"ADMIN_PASSWORD_HASH={digest}")
        # pylint: disable=no-member
        self.stdout.write(
            self.style.WARNING("Store these values in the environment; they are not saved.")
        )
