"""
Django management command to print activation status.
"""

from django.core.management.base import BaseCommand, CommandError

from activations.application.services.activation_manager import ActivationManager
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)


class Command(BaseCommand):
    """Command to check one or all activation codes."""

    help = "Show the status of an activation code, or of every activation"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "activation_code",
            nargs="?",
            default=None,
            help="Activation code (all activations if omitted)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        manager = ActivationManager.from_settings()
        code = options["activation_code"]

        if code:
            status = manager.check_status(code)
            if status.company_name is None:
                raise CommandError(status.message)
            self._write_status(code, status)
            return

        activations = DjangoActivationRepository().find_all()
        self.stdout.write(f"Found {len(activations)} activation(s)")
        for activation in activations:
            self._write_status(activation.code, manager.check_status(activation.code))

    def _write_status(self, code, status):
        # pylint: disable=no-member
        style = self.style.SUCCESS
        if status.expired or not status.is_active:
            style = self.style.WARNING
        expires = status.expires_at.isoformat() if status.expires_at else "never"
        self.stdout.write(
            style(f"  {code} [{status.company_name}] expires {expires}: {status.message}")
        )
