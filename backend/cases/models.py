"""
Cases app models.

Covers the grievance lifecycle — a citizen files a case, an
administrator reviews it exactly once (approve or reject), and an
approved case may later be marked resolved.
"""

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class CaseStatus(models.TextChoices):
    """
    Lifecycle status of a case.

    PENDING → APPROVED → RESOLVED, or PENDING → REJECTED.
    """

    PENDING = "PENDING", "Pending Review"
    APPROVED = "APPROVED", "Approved"
    REJECTED = "REJECTED", "Rejected"
    RESOLVED = "RESOLVED", "Resolved"


class ReviewDecision(models.TextChoices):
    """Outcome an administrator chooses when reviewing a pending case."""

    APPROVE = "APPROVE", "Approve"
    REJECT = "REJECT", "Reject"


class MainCategory(models.TextChoices):
    """Top-level grievance category picked in the submission form."""

    EDUCATION = "education", "Education"
    BANKING = "banking", "Banking"
    GST = "gst", "GST"
    INCOME_TAX = "income-tax", "Income Tax"
    CORRUPTION = "corruption", "Corruption"
    POLITICAL = "political", "Political"


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Case(TimeStampedModel):
    """
    A citizen grievance.

    * ``user`` is the owner and never changes after creation.
    * ``is_public`` is derived: it flips to True when the case is approved
      and is never cleared afterwards.
    * ``reviewed_at`` / ``reviewed_by`` are written once, by the review.
    * ``created_at`` doubles as the submission timestamp.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="cases",
        verbose_name="Filed By",
    )
    status = models.CharField(
        max_length=10,
        choices=CaseStatus.choices,
        default=CaseStatus.PENDING,
        verbose_name="Current Status",
        db_index=True,
    )

    # ── Complaint content ───────────────────────────────────────────
    main_category = models.CharField(
        max_length=20,
        choices=MainCategory.choices,
        verbose_name="Main Category",
        db_index=True,
    )
    case_title = models.CharField(
        max_length=255,
        verbose_name="Case Title",
    )
    name = models.CharField(
        max_length=255,
        verbose_name="Complainant Name",
    )
    email = models.EmailField(
        blank=True,
        default="",
        verbose_name="Contact Email",
    )
    phone_number = models.CharField(
        max_length=15,
        verbose_name="Contact Phone Number",
    )
    case_description = models.TextField(
        verbose_name="Description",
    )
    voice_recording_url = models.URLField(
        max_length=1000,
        blank=True,
        default="",
        verbose_name="Voice Recording URL",
    )
    voice_recording_duration = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name="Voice Recording Duration (s)",
    )

    # ── Location ────────────────────────────────────────────────────
    gps_latitude = models.FloatField(
        null=True,
        blank=True,
        verbose_name="GPS Latitude",
    )
    gps_longitude = models.FloatField(
        null=True,
        blank=True,
        verbose_name="GPS Longitude",
    )
    captured_address = models.TextField(
        blank=True,
        default="",
        verbose_name="Captured Address",
    )

    # ── Review outcome ──────────────────────────────────────────────
    reviewed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Reviewed At",
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="reviewed_cases",
        verbose_name="Reviewed By",
    )
    admin_comments = models.TextField(
        blank=True,
        default="",
        verbose_name="Admin Comments",
    )
    rejection_reason = models.TextField(
        blank=True,
        default="",
        verbose_name="Rejection Reason",
    )
    resolved_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Resolved At",
    )

    # ── Derived / counters ──────────────────────────────────────────
    is_public = models.BooleanField(
        default=False,
        verbose_name="Publicly Visible",
        db_index=True,
    )
    view_count = models.PositiveIntegerField(
        default=0,
        verbose_name="View Count",
    )

    class Meta:
        verbose_name = "Case"
        verbose_name_plural = "Cases"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "status"], name="cases_case_user_status_idx"),
        ]

    def __str__(self):
        return f"Case #{self.pk} — {self.case_title}"


class Attachment(TimeStampedModel):
    """
    Metadata of a file uploaded to external storage for a case.

    The file bytes live in the storage service; the portal only records
    what the storage returned.  Rows are never edited after creation.
    """

    case = models.ForeignKey(
        Case,
        on_delete=models.CASCADE,
        related_name="attachments",
        verbose_name="Case",
    )
    file_name = models.CharField(
        max_length=255,
        verbose_name="File Name",
    )
    file_url = models.URLField(
        max_length=1000,
        verbose_name="File URL",
    )
    file_type = models.CharField(
        max_length=100,
        verbose_name="MIME Type",
    )
    file_size = models.PositiveBigIntegerField(
        default=0,
        verbose_name="File Size (bytes)",
    )
    storage_path = models.CharField(
        max_length=500,
        blank=True,
        default="",
        verbose_name="Storage Path",
    )

    class Meta:
        verbose_name = "Attachment"
        verbose_name_plural = "Attachments"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.file_name} for Case #{self.case_id}"
