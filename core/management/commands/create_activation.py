"""
Django management command to issue a customer activation code.

Prints the new code and, for pre-provisioned codes, the default
admin credentials the customer must change on first login.
"""

from datetime import datetime, timezone

from django.core.management.base import BaseCommand, CommandError

from activations.application.commands.create_activation import CompanyProfile
from activations.application.services.activation_manager import ActivationManager
from core.domain.value_objects import ProvisioningMode


class Command(BaseCommand):
    """Command to create an activation code for a company."""

    help = "Create an activation code for a customer company"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("company_name", help="Customer company name")
        parser.add_argument("--contact-person", default=None)
        parser.add_argument("--contact-phone", default=None)
        parser.add_argument("--contact-email", default=None)
        parser.add_argument(
            "--months",
            type=int,
            default=None,
            help="License term in months (defaults to the configured term)",
        )
        parser.add_argument(
            "--max-users",
            type=int,
            default=None,
            help="Seat limit (defaults to the configured limit)",
        )
        parser.add_argument(
            "--expires",
            default=None,
            help="Explicit end date (YYYY-MM-DD), overrides --months",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        expires_at = None
        if options["expires"]:
            try:
                expires_at = datetime.fromisoformat(options["expires"])
            except ValueError:
                raise CommandError(f"Invalid date: {options['expires']}")
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)

        manager = ActivationManager.from_settings()
        result = manager.create_activation(
            CompanyProfile(
                company_name=options["company_name"],
                contact_person=options["contact_person"],
                contact_phone=options["contact_phone"],
                contact_email=options["contact_email"],
            ),
            duration_months=options["months"],
            max_users=options["max_users"],
            expires_at=expires_at,
        )

        if not result.success:
            raise CommandError(result.message)

        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS("Activation code created"))
        self.stdout.write(f"  Company:         {options['company_name']}")
        self.stdout.write(f"  Activation code: {result.activation_code}")
        if result.expires_at:
            self.stdout.write(f"  Expires at:      {result.expires_at.isoformat()}")

        if manager.policy.provisioning == ProvisioningMode.PRE_PROVISIONED:
            self.stdout.write(f"  Username:        {manager.policy.default_admin_username}")
            self.stdout.write(f"  Password:        {manager.policy.default_admin_password}")
            self.stdout.write(
                self.style.WARNING("Change the default password after the first login")
            )
