# ledger/management/commands/ensure_ledger_users.py
import secrets

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from ledger.models import User

DEMO_SET = [
    ("doctor1", "0xd0c7000000000000000000000000000000000001"),
    ("patient1", "0xba7100000000000000000000000000000000000a"),
]


class Command(BaseCommand):
    help = (
        "Ensure the administrator account (and optionally demo accounts) exist (idempotent). "
        "Existing passwords are only changed when --password is given."
    )

    def add_arguments(self, parser):
        parser.add_argument("--password", default=None, help="set this password on every ensured account")
        parser.add_argument("--demo", action="store_true", help="also create demo doctor/patient accounts")

    def _ensure(self, username, wallet, password, *, staff=False):
        u = User.objects.filter(username=username).first()
        if u is None:
            initial = password or secrets.token_urlsafe(12)
            User.objects.create_user(username=username, password=initial, wallet=wallet, is_staff=staff)
            note = "" if password else f" initial password: {initial}"
            self.stdout.write(self.style.SUCCESS(f"created: {username} ({wallet}){note}"))
            return
        u.wallet = wallet
        u.is_active = True
        u.is_staff = staff
        fields = ["wallet", "is_active", "is_staff"]
        if password:
            u.set_password(password)
            fields.append("password")
        u.save(update_fields=fields)
        self.stdout.write(self.style.SUCCESS(f"ok: {username} ({wallet})"))

    def handle(self, *args, **opts):
        admin_wallet = getattr(settings, "LEDGER_ADMINISTRATOR", "")
        if not admin_wallet:
            raise CommandError("LEDGER_ADMINISTRATOR is not configured")
        self._ensure("ledger-admin", admin_wallet, opts["password"], staff=True)
        if opts["demo"]:
            for username, wallet in DEMO_SET:
                self._ensure(username, wallet, opts["password"])
        self.stdout.write(self.style.SUCCESS("Ledger users ensured."))
