"""
core.domain.notifications — In-app notification dispatch.

Centralises notification creation so every service uses one consistent
entry-point rather than directly constructing ``Notification`` objects.

Design decisions
----------------
* **Synchronous** — rows are written in the calling thread, after the
  lifecycle write has succeeded.
* **Fire-and-forget** — ``dispatch`` runs inside its own savepoint and
  logs any failure instead of raising, so a broken notification never
  undoes or fails the operation that triggered it.
* **Generic relation** — ``related_object`` is optional; if provided
  its ``ContentType`` and PK are stored via the ``Notification`` model's
  ``GenericForeignKey``.

Usage::

    from core.domain.notifications import NotificationService

    NotificationService.dispatch(
        actor_id=request.user.pk,
        target_id=case.pk,
        event_kind=NotificationType.CASE_APPROVED,
        recipients=case.user,
        related_object=case,
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from django.contrib.contenttypes.models import ContentType
from django.db import models, transaction

if TYPE_CHECKING:
    from accounts.models import User
    from core.models import Notification

logger = logging.getLogger(__name__)

# event kind: (title, message template)
_EVENT_TEMPLATES: dict[str, tuple[str, str]] = {
    "CASE_SUBMITTED": ("Case Submitted", "Your case #{target_id} has been submitted and is pending review."),
    "CASE_APPROVED":  ("Case Approved",  "Your case #{target_id} has been approved and is now public."),
    "CASE_REJECTED":  ("Case Rejected",  "Your case #{target_id} has been rejected."),
    "CASE_RESOLVED":  ("Case Resolved",  "Your case #{target_id} has been marked as resolved."),
    "ROLE_CHANGED":   ("Role Updated",   "Your portal role has been changed."),
    "STATUS_CHANGED": ("Account Status Updated", "Your account status has been changed."),
}


class NotificationService:
    """
    Stateless helper for creating ``Notification`` records.

    All methods are classmethods — no instance state is needed.  Services
    receive the class itself as their ``notifier`` so tests can pass a
    subclass.
    """

    @classmethod
    def create(
        cls,
        *,
        actor_id: Any,
        target_id: Any,
        event_kind: str,
        recipients: User | Iterable[User],
        related_object: models.Model | None = None,
    ) -> list[Notification]:
        """
        Create one ``Notification`` per recipient.  Raises on failure.
        """
        from core.models import Notification, NotificationType  # lazy: circular import

        if isinstance(recipients, models.Model):
            recipients = [recipients]
        else:
            recipients = list(recipients)

        if not recipients:
            logger.warning(
                "No recipients for event_kind=%s (actor=%s, target=%s)",
                event_kind, actor_id, target_id,
            )
            return []

        kind = str(event_kind)
        title, template = _EVENT_TEMPLATES.get(
            kind,
            (kind.replace("_", " ").title(), "Event: {event_kind}"),
        )
        message = template.format(target_id=target_id, event_kind=kind)
        notification_type = kind if kind in NotificationType.values else NotificationType.ADMIN_ALERT

        content_type = None
        object_id = None
        if related_object is not None:
            content_type = ContentType.objects.get_for_model(related_object)
            object_id = related_object.pk

        notifications = [
            Notification.objects.create(
                recipient=recipient,
                notification_type=notification_type,
                title=title,
                message=message,
                content_type=content_type,
                object_id=object_id,
            )
            for recipient in recipients
        ]

        logger.info(
            "Created %d notification(s) [%s] actor=%s target=%s",
            len(notifications), kind, actor_id, target_id,
        )
        return notifications

    @classmethod
    def dispatch(cls, **kwargs: Any) -> list[Notification]:
        """
        Same arguments as ``create`` but never raises.

        Runs in a savepoint so a failed insert cannot poison an
        enclosing transaction.  Returns an empty list on failure.
        """
        try:
            with transaction.atomic():
                return cls.create(**kwargs)
        except Exception:
            logger.exception(
                "Notification dispatch failed for event_kind=%s (actor=%s, target=%s)",
                kwargs.get("event_kind"),
                kwargs.get("actor_id"),
                kwargs.get("target_id"),
            )
            return []
