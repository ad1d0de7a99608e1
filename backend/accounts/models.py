"""
Accounts app models.

Defines the closed ``Role`` enumeration and the custom ``User`` model
(the *actor* of every lifecycle operation).  Accounts are created by the
external identity provider; the portal itself only ever changes a user's
``role`` and ``is_active`` flag.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.TextChoices):
    """
    The three portal roles.

    Stored as a plain string column but always validated against this
    enumeration before it reaches the authorization policy.
    """

    USER = "USER", "User"
    ADMIN = "ADMIN", "Administrator"
    SUPERADMIN = "SUPERADMIN", "Super Administrator"

    @classmethod
    def reviewer_roles(cls) -> frozenset[str]:
        """Roles allowed to review and resolve cases."""
        return frozenset({cls.ADMIN, cls.SUPERADMIN})


class User(AbstractUser):
    """
    Custom user model for the grievance portal.

    ``phone_number`` is the identity the OTP provider authenticates;
    ``total_cases_filed`` is a derived counter maintained by the case
    lifecycle service whenever the user submits a case.
    """

    phone_number = models.CharField(
        max_length=15,
        unique=True,
        verbose_name="Phone Number",
        db_index=True,
    )
    full_name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name="Full Name",
    )
    address = models.TextField(
        blank=True,
        default="",
        verbose_name="Address",
    )
    profile_picture_url = models.URLField(
        max_length=1000,
        blank=True,
        default="",
        verbose_name="Profile Picture URL",
    )
    role = models.CharField(
        max_length=12,
        choices=Role.choices,
        default=Role.USER,
        verbose_name="Role",
        db_index=True,
    )
    total_cases_filed = models.PositiveIntegerField(
        default=0,
        verbose_name="Total Cases Filed",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
    )

    # Fields required when creating a superuser via CLI
    REQUIRED_FIELDS = ["email", "phone_number"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ["-date_joined"]

    def __str__(self):
        return f"{self.username} ({self.full_name or self.phone_number}) - {self.role}"

    @property
    def is_reviewer(self) -> bool:
        """True for ADMIN and SUPERADMIN accounts."""
        return self.role in Role.reviewer_roles()
