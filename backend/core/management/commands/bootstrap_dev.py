# backend/core/management/commands/bootstrap_dev.py
import os

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import BaseCommand
from rest_framework.authtoken.models import Token

from accounts.permissions import Role


class Command(BaseCommand):
    help = "Idempotently ensure a dev Admin (with DRF token) and the per-role test users exist."

    def add_arguments(self, parser):
        parser.add_argument("--skip-test-users", action="store_true", help="Only create the dev Admin.")

    def handle(self, *args, **opts):
        User = get_user_model()
        username = os.getenv("DEV_ADMIN_USER", "ops")
        email = os.getenv("DEV_ADMIN_EMAIL", "ops@freightdesk.test")
        password = os.getenv("DEV_ADMIN_PASS", "ChangeMe123!")

        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": email, "is_staff": True, "is_superuser": True, "role": Role.ADMIN},
        )
        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(self.style.SUCCESS(f"Created Admin '{username}'"))
        else:
            self.stdout.write(f"Admin '{username}' already exists")

        token, _ = Token.objects.get_or_create(user=user)
        self.stdout.write(self.style.SUCCESS(f"TOKEN: {token.key}"))

        if not opts["skip_test_users"]:
            call_command("create_test_users", stdout=self.stdout)
