"""
Cases app Service Layer.

This module is the **single source of truth** for all business logic
in the ``cases`` app.  Views must remain thin: validate input via
serializers, call a service method, and return the result wrapped in
a DRF ``Response``.

Architecture
------------
- ``CaseLifecycleService``  — submission, review, resolution,
                              attachments and public view counting.
- ``CaseQueryService``      — visibility-scoped querysets and lookups.

Lifecycle State-Machine
-----------------------
::

    PENDING ──APPROVE──▶ APPROVED ──resolve──▶ RESOLVED
       │
       └──REJECT──▶ REJECTED

* A case is reviewed exactly once.  Reviewing a case that is no longer
  PENDING is always an ``InvalidState`` error, never a silent no-op.
* REJECTED and RESOLVED are terminal.
* ``is_public`` becomes True on approval and is never cleared; a
  rejection never touches it.

Every status write is a compare-and-set against the status the service
loaded, so two concurrent reviews of one case cannot both succeed: the
loser gets ``Conflict`` (or ``InvalidState`` if it loaded after the
winner committed).

Notifications are dispatched after the write has committed and never
fail the operation.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from django.db.models import QuerySet
from django.utils import timezone

from core.domain.access import Action, decide, require
from core.domain.exceptions import InvalidArgument, InvalidState
from core.domain.notifications import NotificationService
from core.domain.store import PortalStore
from core.domain.transactions import bounded_atomic
from core.models import NotificationType

from .models import Attachment, Case, CaseStatus, MainCategory, ReviewDecision

logger = logging.getLogger(__name__)


#: Fields a citizen supplies when filing a case.
SUBMITTABLE_FIELDS: frozenset[str] = frozenset({
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
})

REQUIRED_SUBMIT_FIELDS: tuple[str, ...] = (
    "main_category",
    "case_title",
    "name",
    "phone_number",
    "case_description",
)

ATTACHMENT_FIELDS: frozenset[str] = frozenset({
    "file_name", "file_url", "file_type", "file_size", "storage_path",
})

REQUIRED_ATTACHMENT_FIELDS: tuple[str, ...] = ("file_name", "file_url", "file_type")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def clean_case_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Validate submission fields; raise ``InvalidArgument`` on bad input."""
    unknown = set(fields) - SUBMITTABLE_FIELDS
    if unknown:
        raise InvalidArgument(f"Unknown case field(s): {', '.join(sorted(unknown))}.")
    missing = [name for name in REQUIRED_SUBMIT_FIELDS if _is_blank(fields.get(name))]
    if missing:
        raise InvalidArgument(f"Missing required field(s): {', '.join(missing)}.")
    if fields["main_category"] not in MainCategory.values:
        raise InvalidArgument(
            f"Unknown category {fields['main_category']!r}. "
            f"Must be one of: {', '.join(MainCategory.values)}."
        )
    return {k: v for k, v in fields.items() if v is not None}


def clean_attachment_metadata(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """Validate attachment metadata returned by the file storage."""
    unknown = set(metadata) - ATTACHMENT_FIELDS
    if unknown:
        raise InvalidArgument(f"Unknown attachment field(s): {', '.join(sorted(unknown))}.")
    missing = [name for name in REQUIRED_ATTACHMENT_FIELDS if _is_blank(metadata.get(name))]
    if missing:
        raise InvalidArgument(f"Missing attachment field(s): {', '.join(missing)}.")
    size = metadata.get("file_size", 0)
    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        raise InvalidArgument("file_size must be a non-negative integer.")
    return dict(metadata)


def _parse_decision(value: Any) -> ReviewDecision:
    try:
        return ReviewDecision(str(value).upper())
    except ValueError:
        raise InvalidArgument(
            f"Unknown review decision {value!r}. Must be APPROVE or REJECT."
        ) from None


# ═══════════════════════════════════════════════════════════════════
#  Case Lifecycle Service
# ═══════════════════════════════════════════════════════════════════


class CaseLifecycleService:
    """
    Orchestrates every status-changing operation on a case.

    Each operation loads the current state from the store, consults the
    authorization policy, computes the new state (including derived
    fields) and writes it back atomically.

    ``store`` and ``notifier`` default to ``PortalStore()`` and
    ``NotificationService``; tests substitute either.
    """

    def __init__(self, store: PortalStore | None = None, notifier: type[NotificationService] | None = None) -> None:
        self.store = store or PortalStore()
        self.notifier = notifier or NotificationService

    # ── Submission ──────────────────────────────────────────────────

    def submit_case(
        self,
        owner: Any,
        fields: Mapping[str, Any],
        attachments: Iterable[Mapping[str, Any]] = (),
        *,
        timeout: float | None = None,
    ) -> Case:
        """
        File a new case for ``owner``.

        The case starts PENDING, not public, with no views.  The owner's
        ``total_cases_filed`` counter and any attachment rows are written
        in the same transaction as the case.

        Raises
        ------
        PermissionDenied  ``inactive-actor``.
        InvalidArgument   Missing/unknown fields or bad attachment metadata.
        Unavailable       Storage failure.
        """
        require(owner, Action.SUBMIT_CASE)
        cleaned = clean_case_fields(fields)
        cleaned_attachments = [clean_attachment_metadata(a) for a in attachments]

        with bounded_atomic(timeout):
            case = self.store.create_case(owner.pk, cleaned)
            for metadata in cleaned_attachments:
                self.store.append_attachment(case.pk, metadata)

        logger.info(
            "Case %s submitted by user %s with %d attachment(s)",
            case.pk, owner.pk, len(cleaned_attachments),
        )
        self.notifier.dispatch(
            actor_id=owner.pk,
            target_id=case.pk,
            event_kind=NotificationType.CASE_SUBMITTED,
            recipients=owner,
            related_object=case,
        )
        return case

    # ── Review ──────────────────────────────────────────────────────

    def review_case(
        self,
        actor: Any,
        case_id: Any,
        decision: Any,
        comments: str | None = None,
        rejection_reason: str | None = None,
        *,
        timeout: float | None = None,
    ) -> Case:
        """
        Approve or reject a PENDING case.

        Checks run in this order: the case must exist, the actor must
        be allowed to review, the case must still be PENDING, and a
        rejection must carry a non-blank reason.

        Returns
        -------
        Case
            The case as written (``reviewed_at``/``reviewed_by`` set;
            ``is_public`` True on approval).

        Raises
        ------
        NotFound          No such case.
        PermissionDenied  ``insufficient-role`` or ``inactive-actor``.
        InvalidState      The case is not PENDING.
        InvalidArgument   Unknown decision, or REJECT without a reason.
        Conflict          Another review committed between load and write.
        Unavailable       Storage failure or timeout.
        """
        case = self.store.load_case(case_id, timeout=timeout)
        require(actor, Action.REVIEW_CASE, case)

        if case.status != CaseStatus.PENDING:
            raise InvalidState(
                current=case.status,
                target="reviewed",
                reason="Only pending cases can be reviewed.",
            )

        decision = _parse_decision(decision)
        changes: dict[str, Any] = {
            "reviewed_at": timezone.now(),
            "reviewed_by_id": actor.pk,
        }
        if comments is not None:
            changes["admin_comments"] = comments

        if decision == ReviewDecision.APPROVE:
            changes.update(status=CaseStatus.APPROVED, is_public=True)
            event_kind = NotificationType.CASE_APPROVED
        else:
            if _is_blank(rejection_reason):
                raise InvalidArgument("A rejection reason is required when rejecting a case.")
            if not isinstance(rejection_reason, str):
                raise InvalidArgument("The rejection reason must be text.")
            changes.update(status=CaseStatus.REJECTED, rejection_reason=rejection_reason.strip())
            event_kind = NotificationType.CASE_REJECTED

        updated = self.store.compare_and_swap_case(
            case.pk, CaseStatus.PENDING, changes, timeout=timeout,
        )
        logger.info(
            "Case %s reviewed by %s: %s -> %s",
            updated.pk, actor.pk, CaseStatus.PENDING, updated.status,
        )
        self.notifier.dispatch(
            actor_id=actor.pk,
            target_id=updated.pk,
            event_kind=event_kind,
            recipients=updated.user,
            related_object=updated,
        )
        return updated

    # ── Resolution ──────────────────────────────────────────────────

    def resolve_case(self, actor: Any, case_id: Any, *, timeout: float | None = None) -> Case:
        """
        Mark an APPROVED case as RESOLVED.

        ``is_public`` stays True.  Resolving anything other than an
        APPROVED case raises ``InvalidState``; the other errors match
        ``review_case``.
        """
        case = self.store.load_case(case_id, timeout=timeout)
        require(actor, Action.REVIEW_CASE, case)

        if case.status != CaseStatus.APPROVED:
            raise InvalidState(
                current=case.status,
                target=CaseStatus.RESOLVED,
                reason="Only approved cases can be resolved.",
            )

        updated = self.store.compare_and_swap_case(
            case.pk,
            CaseStatus.APPROVED,
            {"status": CaseStatus.RESOLVED, "resolved_at": timezone.now()},
            timeout=timeout,
        )
        logger.info("Case %s resolved by %s", updated.pk, actor.pk)
        self.notifier.dispatch(
            actor_id=actor.pk,
            target_id=updated.pk,
            event_kind=NotificationType.CASE_RESOLVED,
            recipients=updated.user,
            related_object=updated,
        )
        return updated

    # ── Attachments ─────────────────────────────────────────────────

    def add_attachment(
        self,
        actor: Any,
        case_id: Any,
        metadata: Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> Attachment:
        """
        Record metadata of a file the owner uploaded for a PENDING case.

        Raises ``NotFound``, ``PermissionDenied`` (``not-case-owner`` /
        ``inactive-actor``), ``InvalidState`` once the case has been
        reviewed, or ``InvalidArgument`` for incomplete metadata.
        """
        case = self.store.load_case(case_id, timeout=timeout)
        require(actor, Action.ATTACH_TO_CASE, case)
        if case.status != CaseStatus.PENDING:
            raise InvalidState(
                current=case.status,
                reason="Attachments can only be added while the case is pending.",
            )
        attachment = self.store.append_attachment(
            case.pk, clean_attachment_metadata(metadata), timeout=timeout,
        )
        logger.info("Attachment %s added to case %s", attachment.pk, case.pk)
        return attachment

    # ── Public views ────────────────────────────────────────────────

    def record_view(self, case_id: Any, *, timeout: float | None = None) -> Case:
        """Count one view of a public case; non-public cases are ``NotFound``."""
        return self.store.increment_case_views(case_id, timeout=timeout)


# ═══════════════════════════════════════════════════════════════════
#  Case Query Service
# ═══════════════════════════════════════════════════════════════════


class CaseQueryService:
    """
    Visibility-scoped case lookups.

    * Owners see their own cases.
    * ADMIN / SUPERADMIN see every case.
    * Anyone sees public (approved or resolved) cases.
    """

    def __init__(self, store: PortalStore | None = None) -> None:
        self.store = store or PortalStore()

    @staticmethod
    def list_own_cases(actor: Any) -> QuerySet[Case]:
        return (
            Case.objects
            .filter(user_id=actor.pk)
            .prefetch_related("attachments")
            .order_by("-created_at")
        )

    @staticmethod
    def list_all_cases(actor: Any, status: str | None = None) -> QuerySet[Case]:
        """All cases, newest first, optionally filtered by ``status``."""
        require(actor, Action.VIEW_ALL_CASES)
        qs = Case.objects.select_related("user", "reviewed_by").order_by("-created_at")
        if status:
            if status not in CaseStatus.values:
                raise InvalidArgument(
                    f"Unknown status {status!r}. Must be one of: {', '.join(CaseStatus.values)}."
                )
            qs = qs.filter(status=status)
        return qs

    @staticmethod
    def list_public_cases() -> QuerySet[Case]:
        return Case.objects.filter(is_public=True).order_by("-created_at")

    def get_case(self, actor: Any, case_id: Any) -> Case:
        """
        Return one case visible to ``actor``.

        Owners and administrators may read it; anyone else gets
        ``PermissionDenied`` (``not-case-owner``).
        """
        case = self.store.load_case(case_id)
        if not decide(actor, Action.VIEW_ALL_CASES):
            require(actor, Action.VIEW_OWN_CASES, case)
        return case

    def list_attachments(self, actor: Any, case_id: Any) -> QuerySet[Attachment]:
        case = self.get_case(actor, case_id)
        return case.attachments.order_by("-created_at")
