"""
Core app serializers.

**Response-only** serializers for the dashboard and notification
endpoints.  They work with plain dicts produced by the service layer or
with ``Notification`` instances; they never accept input.
"""

from __future__ import annotations

from rest_framework import serializers


class DashboardStatsSerializer(serializers.Serializer):
    """
    Case counts shown on the administrator dashboard.

    Example::

        {
            "total_cases": 42,
            "pending_cases": 7,
            "approved_cases": 20,
            "rejected_cases": 5,
            "resolved_cases": 10,
            "public_cases": 30
        }
    """

    total_cases = serializers.IntegerField(help_text="All cases ever submitted.")
    pending_cases = serializers.IntegerField(help_text="Cases awaiting review.")
    approved_cases = serializers.IntegerField(help_text="Approved, not yet resolved.")
    rejected_cases = serializers.IntegerField(help_text="Rejected cases.")
    resolved_cases = serializers.IntegerField(help_text="Resolved cases.")
    public_cases = serializers.IntegerField(
        help_text="Cases visible on the public feed (approved or resolved).",
    )


class NotificationSerializer(serializers.Serializer):
    """
    Read-only serializer for ``Notification`` instances.

    Used by the Notification ViewSet to list and mark notifications for
    the authenticated user.
    """

    id = serializers.IntegerField(read_only=True, help_text="Notification PK.")
    notification_type = serializers.CharField(
        read_only=True,
        help_text="Event kind, e.g. CASE_APPROVED or ROLE_CHANGED.",
    )
    title = serializers.CharField(
        read_only=True,
        help_text="Short notification title.",
    )
    message = serializers.CharField(
        read_only=True,
        help_text="Full notification message body.",
    )
    is_read = serializers.BooleanField(
        read_only=True,
        help_text="Whether the recipient has marked this notification as read.",
    )
    created_at = serializers.DateTimeField(
        read_only=True,
        help_text="When the notification was created.",
    )
    content_type = serializers.StringRelatedField(
        read_only=True,
        help_text="Related content type (if any).",
    )
    object_id = serializers.IntegerField(
        read_only=True,
        allow_null=True,
        help_text="PK of the related object (if any).",
    )
