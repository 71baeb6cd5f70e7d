# backend/accounts/models.py

from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    ROLE_CHOICES = [
        ('Admin', 'Admin'),
        ('QuotationCreator', 'Quotation Creator'),
        ('BookingCreator', 'Booking Creator'),
        ('Reviewer', 'Reviewer'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='Reviewer')

    @property
    def effective_role(self):
        """Superusers act as Admin whatever their stored role."""
        return 'Admin' if self.is_superuser else self.role

    def can(self, action):
        from .permissions import can_perform

        return can_perform(self.effective_role, action)

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"
