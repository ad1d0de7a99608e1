"""
Core app services — **Service Layer**.

Contains the cross-app dashboard aggregation and the per-user
notification inbox.  Views delegate all business logic to the service
classes defined here, keeping views thin and ensuring testability.

╔══════════════════════════════════════════════════════════════════════╗
║  CROSS-APP IMPORT RULEBOOK                                         ║
║                                                                    ║
║  The core app is imported by every other app, so it must never     ║
║  import models from ``cases`` or ``accounts`` at module level.     ║
║  Resolve them lazily::                                             ║
║                                                                    ║
║      from django.apps import apps                                  ║
║      Case = apps.get_model("cases", "Case")                        ║
║                                                                    ║
║  and keep type hints behind ``TYPE_CHECKING``.                     ║
╚══════════════════════════════════════════════════════════════════════╝
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from django.apps import apps
from django.db.models import Count, Q, QuerySet

from core.domain.access import Action, require
from core.domain.exceptions import NotFound
from core.domain.transactions import translate_db_errors

if TYPE_CHECKING:
    from accounts.models import User
    from core.models import Notification

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════
#  Dashboard Aggregation Service
# ════════════════════════════════════════════════════════════════════

class DashboardAggregationService:
    """
    Case counts for the administrator dashboard.

    Only ADMIN and SUPERADMIN actors may read the statistics; the policy
    check is the same one that guards the full case list.

    Output keys: ``total_cases``, ``pending_cases``, ``approved_cases``,
    ``rejected_cases``, ``resolved_cases``, ``public_cases``.
    """

    def __init__(self, user: User) -> None:
        self.user = user

    def get_stats(self) -> dict[str, int]:
        require(self.user, Action.VIEW_ALL_CASES)

        Case = apps.get_model("cases", "Case")
        from cases.models import CaseStatus

        with translate_db_errors():
            stats = Case.objects.aggregate(
                total_cases=Count("pk"),
                pending_cases=Count("pk", filter=Q(status=CaseStatus.PENDING)),
                approved_cases=Count("pk", filter=Q(status=CaseStatus.APPROVED)),
                rejected_cases=Count("pk", filter=Q(status=CaseStatus.REJECTED)),
                resolved_cases=Count("pk", filter=Q(status=CaseStatus.RESOLVED)),
                public_cases=Count("pk", filter=Q(is_public=True)),
            )
        return {key: value or 0 for key, value in stats.items()}


# ═══════════════════════════════════════════════════════════════════
#  Notification Service
# ═══════════════════════════════════════════════════════════════════

class NotificationService:
    """
    Handles listing and marking notifications as read for a given user.

    Creation lives in ``core.domain.notifications``; this class is the
    recipient's read side.
    """

    def __init__(self, user: Any) -> None:
        self.user = user

    def list_notifications(self, *, unread_only: bool = False) -> QuerySet:
        """Return notifications for ``self.user``, most recent first."""
        from core.models import Notification

        qs = (
            Notification.objects
            .filter(recipient=self.user)
            .select_related("content_type")
            .order_by("-created_at")
        )
        if unread_only:
            qs = qs.filter(is_read=False)
        return qs

    def mark_as_read(self, notification_id: int) -> Notification:
        """Mark a single notification as read.  Idempotent."""
        from core.models import Notification

        try:
            notification = Notification.objects.get(
                pk=notification_id,
                recipient=self.user,
            )
        except (Notification.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Notification with id {notification_id} not found.") from None
        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read", "updated_at"])
        return notification
