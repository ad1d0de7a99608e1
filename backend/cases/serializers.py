"""
Cases app serializers.

Request serializers only check the *shape* of the payload.  Lifecycle
rules (who may review, which status allows what, the rejection-reason
requirement) are enforced by ``CaseLifecycleService`` so that every
entry point reports them the same way.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import Attachment, Case, MainCategory, ReviewDecision


# ═══════════════════════════════════════════════════════════════════
#  Attachments
# ═══════════════════════════════════════════════════════════════════


class AttachmentSerializer(serializers.ModelSerializer):
    """Read representation of an attachment's stored metadata."""

    class Meta:
        model = Attachment
        fields = [
            "id",
            "file_name",
            "file_url",
            "file_type",
            "file_size",
            "storage_path",
            "created_at",
        ]
        read_only_fields = fields


class AttachmentCreateSerializer(serializers.Serializer):
    """
    Metadata returned by the file storage after an upload.

    The bytes themselves never pass through this API.
    """

    file_name = serializers.CharField(max_length=255)
    file_url = serializers.URLField(max_length=1000)
    file_type = serializers.CharField(max_length=100, help_text="MIME type, e.g. image/jpeg.")
    file_size = serializers.IntegerField(min_value=0, default=0, help_text="Size in bytes.")
    storage_path = serializers.CharField(max_length=500, required=False, allow_blank=True)


# ═══════════════════════════════════════════════════════════════════
#  Case read serializers
# ═══════════════════════════════════════════════════════════════════


class CaseListSerializer(serializers.ModelSerializer):
    """Compact row for case lists (own cases and the admin list)."""

    user_phone_number = serializers.CharField(source="user.phone_number", read_only=True)

    class Meta:
        model = Case
        fields = [
            "id",
            "case_title",
            "main_category",
            "status",
            "is_public",
            "user",
            "user_phone_number",
            "view_count",
            "created_at",
            "reviewed_at",
            "resolved_at",
        ]
        read_only_fields = fields


class CaseDetailSerializer(serializers.ModelSerializer):
    """Everything the owner or an administrator may see about a case."""

    attachments = AttachmentSerializer(many=True, read_only=True)
    reviewed_by_name = serializers.CharField(
        source="reviewed_by.full_name",
        read_only=True,
        default=None,
    )

    class Meta:
        model = Case
        fields = [
            "id",
            "user",
            "status",
            "is_public",
            "main_category",
            "case_title",
            "name",
            "email",
            "phone_number",
            "case_description",
            "voice_recording_url",
            "voice_recording_duration",
            "gps_latitude",
            "gps_longitude",
            "captured_address",
            "reviewed_at",
            "reviewed_by",
            "reviewed_by_name",
            "admin_comments",
            "rejection_reason",
            "resolved_at",
            "view_count",
            "attachments",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PublicCaseSerializer(serializers.ModelSerializer):
    """
    Public feed representation.

    Leaves out the complainant's contact details and location.
    """

    class Meta:
        model = Case
        fields = [
            "id",
            "case_title",
            "main_category",
            "case_description",
            "status",
            "view_count",
            "created_at",
            "resolved_at",
        ]
        read_only_fields = fields


# ═══════════════════════════════════════════════════════════════════
#  Case write serializers
# ═══════════════════════════════════════════════════════════════════


class CaseSubmitSerializer(serializers.Serializer):
    """
    Request body for ``POST /api/cases/``.

    ``attachments`` is an optional list of storage metadata for files
    the citizen uploaded while filling in the form.
    """

    main_category = serializers.ChoiceField(choices=MainCategory.choices)
    case_title = serializers.CharField(max_length=255)
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone_number = serializers.CharField(max_length=15)
    case_description = serializers.CharField()
    voice_recording_url = serializers.URLField(max_length=1000, required=False, allow_blank=True)
    voice_recording_duration = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    gps_latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    gps_longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)
    captured_address = serializers.CharField(required=False, allow_blank=True)
    attachments = AttachmentCreateSerializer(many=True, required=False)


class CaseReviewSerializer(serializers.Serializer):
    """
    Request body for ``POST /api/cases/{id}/review/``.

    ``rejection_reason`` is required for ``REJECT``; the check happens in
    the service, after the case's status has been verified.
    """

    decision = serializers.CharField(
        help_text=f"One of: {', '.join(ReviewDecision.values)}.",
    )
    comments = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
        max_length=5000,
    )
    rejection_reason = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
        max_length=5000,
    )
