from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from accounts.models import CustomUser
from accounts.permissions import Role

TEST_USERS = [
    {'username': 'admin_user', 'email': 'admin@freightdesk.test', 'password': 'admin_password', 'role': Role.ADMIN},
    {'username': 'quotation_user', 'email': 'quotes@freightdesk.test', 'password': 'quotation_password', 'role': Role.QUOTATION_CREATOR},
    {'username': 'booking_user', 'email': 'bookings@freightdesk.test', 'password': 'booking_password', 'role': Role.BOOKING_CREATOR},
    {'username': 'reviewer_user', 'email': 'review@freightdesk.test', 'password': 'reviewer_password', 'role': Role.REVIEWER},
]


class Command(BaseCommand):
    help = 'Create one test user per role'

    def handle(self, *args, **options):
        created = 0
        for user_data in TEST_USERS:
            if CustomUser.objects.filter(username=user_data['username']).exists():
                self.stdout.write(
                    self.style.WARNING(f"User {user_data['username']} already exists")
                )
                continue

            user = CustomUser.objects.create(
                username=user_data['username'],
                email=user_data['email'],
                password=make_password(user_data['password']),
                role=user_data['role'],
            )
            created += 1
            self.stdout.write(
                self.style.SUCCESS(f"Created {user.role} user: {user.username}")
            )

        self.stdout.write(self.style.SUCCESS(f"Test users ready ({created} new)."))
