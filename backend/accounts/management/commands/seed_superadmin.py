"""
Management command: seed_superadmin
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Creates the first **Super Admin** account of a fresh portal.

The command refuses to run once any SUPERADMIN exists, so it cannot be
used to mint extra super-admins later; further role changes go through
the user-management API.

Usage::

    python manage.py seed_superadmin --phone 9876543210 \\
        --full-name "Portal Owner" --address "Head Office"

    python manage.py seed_superadmin --check   # exit status only
"""

from django.core.management.base import BaseCommand, CommandError

from accounts.services import SuperAdminBootstrapService
from core.domain.exceptions import DomainError


class Command(BaseCommand):
    help = "Seed the first Super Admin account (only while none exists)."

    def add_arguments(self, parser):
        parser.add_argument("--phone", dest="phone_number", help="Phone number of the new Super Admin.")
        parser.add_argument("--full-name", dest="full_name", default="")
        parser.add_argument("--address", default="")
        parser.add_argument("--email", default=None)
        parser.add_argument("--password", default=None, help="Optional local password (admin site login).")
        parser.add_argument(
            "--check",
            action="store_true",
            help="Only report whether a Super Admin already exists.",
        )

    def handle(self, *args, **options):
        service = SuperAdminBootstrapService()

        if options["check"]:
            if service.superadmin_exists():
                self.stdout.write(self.style.SUCCESS("  ✔  A Super Admin exists."))
                return
            raise CommandError("No Super Admin exists yet.")

        if not options["phone_number"]:
            raise CommandError("--phone is required.")

        try:
            user = service.seed_first_superadmin(
                phone_number=options["phone_number"],
                full_name=options["full_name"],
                address=options["address"],
                email=options["email"],
                password=options["password"],
            )
        except DomainError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(self.style.SUCCESS(
            f"  ✔  Super Admin created: {user.phone_number} (id={user.pk})"
        ))
