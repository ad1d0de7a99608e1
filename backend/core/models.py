"""
Core app models.

Provides abstract base models and shared utilities used across the project.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides self-updating ``created_at`` and
    ``updated_at`` timestamp fields for every concrete child model.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
    )

    class Meta:
        abstract = True


class NotificationType(models.TextChoices):
    """Kinds of in-app notifications emitted by the lifecycle services."""

    CASE_SUBMITTED = "CASE_SUBMITTED", "Case Submitted"
    CASE_APPROVED = "CASE_APPROVED", "Case Approved"
    CASE_REJECTED = "CASE_REJECTED", "Case Rejected"
    CASE_RESOLVED = "CASE_RESOLVED", "Case Resolved"
    ROLE_CHANGED = "ROLE_CHANGED", "Role Changed"
    STATUS_CHANGED = "STATUS_CHANGED", "Account Status Changed"
    ADMIN_ALERT = "ADMIN_ALERT", "Admin Alert"


class Notification(TimeStampedModel):
    """
    In-app notification sent to a user about their case or account.

    Uses a GenericForeignKey so any model instance can be the *source* of
    a notification (a reviewed case, a user whose role changed).
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name="Recipient",
    )
    notification_type = models.CharField(
        max_length=20,
        choices=NotificationType.choices,
        default=NotificationType.ADMIN_ALERT,
        verbose_name="Type",
    )
    title = models.CharField(max_length=255, verbose_name="Title")
    message = models.TextField(verbose_name="Message")
    is_read = models.BooleanField(default=False, verbose_name="Read")

    # Generic relation to the object that triggered the notification
    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        verbose_name="Related Content Type",
    )
    object_id = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name="Related Object ID",
    )
    content_object = GenericForeignKey("content_type", "object_id")

    class Meta:
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "is_read"], name="core_notif_recipient_read_idx"),
        ]

    def __str__(self):
        return f"[{self.recipient}] {self.title}"
