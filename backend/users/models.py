"""
User models for the Budget Buddy application.

This module defines the CustomUser model which extends Django's AbstractUser
with a unique email, an application role and budgeting profile fields, plus
the OneTimePasscode model that backs the second login factor.
"""

from datetime import timedelta

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.core.validators import MinLengthValidator, MinValueValidator, RegexValidator
from django.db import models
from django.utils import timezone


class CustomUser(AbstractUser):
    """
    Custom user model extending Django's AbstractUser.

    Users log in with email and password and must confirm an emailed one-time
    passcode before a JWT is issued. The role decides whether a user only
    sees their own finance records or everyone's.
    """

    ROLE_USER = "user"
    ROLE_MANAGER = "manager"
    ROLE_ADMIN = "admin"
    ROLE_CHOICES = [
        (ROLE_USER, "User"),
        (ROLE_MANAGER, "Manager"),
        (ROLE_ADMIN, "Admin"),
    ]
    ELEVATED_ROLES = (ROLE_MANAGER, ROLE_ADMIN)

    # Email field - unique and required, used as the login identifier
    email = models.EmailField(
        unique=True,
        blank=False,
        help_text="User's unique email address, used to log in",
    )

    username = models.CharField(
        max_length=30,
        unique=True,
        validators=[MinLengthValidator(3)],
        help_text="Unique username, 3-30 characters",
    )

    role = models.CharField(
        max_length=10,
        choices=ROLE_CHOICES,
        default=ROLE_USER,
        help_text="Managers and admins can see and manage every user's records",
    )

    currency = models.CharField(
        max_length=3,
        default="USD",
        validators=[
            RegexValidator(r"^[A-Z]{3}$", "Currency must be a 3-letter code.")
        ],
    )

    monthly_income = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )

    @property
    def is_elevated(self):
        """True for managers, admins and superusers."""
        return self.is_superuser or self.role in self.ELEVATED_ROLES

    def __str__(self):
        return self.username or f"User {self.id} ({self.email})"


class OneTimePasscode(models.Model):
    """
    Pending login passcode for one email address.

    Only a hash of the code is stored. Issuing a new code replaces the old
    one, so there is at most one row per email.
    """

    email = models.EmailField(unique=True)
    code_hash = models.CharField(max_length=128)
    attempts = models.PositiveSmallIntegerField(default=0)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=["expires_at"], name="users_otp_expires_idx")]

    @staticmethod
    def default_expiry():
        minutes = getattr(settings, "OTP_EXPIRY_MINUTES", 10)
        return timezone.now() + timedelta(minutes=minutes)

    @property
    def is_expired(self):
        return timezone.now() > self.expires_at

    def __str__(self):
        return f"OTP for {self.email} (expires {self.expires_at:%Y-%m-%d %H:%M})"
