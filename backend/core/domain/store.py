"""
core.domain.store — The persistence collaborator of the lifecycle engine.

``PortalStore`` is the only component that writes cases, attachments
and actors.  Services receive an instance (default: ``PortalStore()``)
so tests can substitute a subclass, e.g. one that simulates a
concurrent writer between load and write.

Every method accepts an optional ``timeout`` in seconds and runs inside
``bounded_atomic``; database failures surface as ``Unavailable``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from django.apps import apps
from django.db.models import F
from django.utils import timezone

from core.domain.exceptions import NotFound
from core.domain.transactions import (
    advisory_xact_lock,
    bounded_atomic,
    compare_and_swap,
    translate_db_errors,
)

if TYPE_CHECKING:
    from accounts.models import User
    from cases.models import Attachment, Case

logger = logging.getLogger(__name__)

SUPERADMIN_SEED_LOCK_KEY = 0x5EED_5A01


class PortalStore:
    """Django ORM implementation of the engine's storage operations."""

    @staticmethod
    def _case_model():
        return apps.get_model("cases", "Case")

    @staticmethod
    def _attachment_model():
        return apps.get_model("cases", "Attachment")

    @staticmethod
    def _user_model():
        return apps.get_model("accounts", "User")

    # ── Reads ───────────────────────────────────────────────────────

    def load_case(self, case_id: Any, *, timeout: float | None = None) -> Case:
        Case = self._case_model()
        with bounded_atomic(timeout):
            try:
                return Case.objects.select_related("user", "reviewed_by").get(pk=case_id)
            except (Case.DoesNotExist, ValueError, TypeError):
                raise NotFound(f"Case with id {case_id} not found.") from None

    def load_actor(self, user_id: Any, *, timeout: float | None = None) -> User:
        User = self._user_model()
        with bounded_atomic(timeout):
            try:
                return User.objects.get(pk=user_id)
            except (User.DoesNotExist, ValueError, TypeError):
                raise NotFound(f"User with id {user_id} not found.") from None

    # ── Writes ──────────────────────────────────────────────────────

    def create_case(
        self,
        owner_id: Any,
        fields: Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> Case:
        """
        Insert a PENDING case and bump the owner's ``total_cases_filed``
        in the same transaction.
        """
        from cases.models import CaseStatus

        Case = self._case_model()
        User = self._user_model()
        with bounded_atomic(timeout):
            case = Case.objects.create(
                **dict(fields),
                user_id=owner_id,
                status=CaseStatus.PENDING,
                is_public=False,
                view_count=0,
            )
            User.objects.filter(pk=owner_id).update(total_cases_filed=F("total_cases_filed") + 1)
        logger.debug("Stored case %s for owner %s", case.pk, owner_id)
        return case

    def compare_and_swap_case(
        self,
        case_id: Any,
        expected_status: str,
        changes: Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> Case:
        """
        Write ``changes`` only if the case is still in ``expected_status``.

        Raises ``Conflict`` when another writer got there first.
        """
        with bounded_atomic(timeout):
            return compare_and_swap(
                self._case_model(),
                pk=case_id,
                field="status",
                expected=expected_status,
                changes={"updated_at": timezone.now(), **changes},
            )

    def save_actor(
        self,
        user_id: Any,
        changes: Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> User:
        User = self._user_model()
        with bounded_atomic(timeout):
            updated = User.objects.filter(pk=user_id).update(**{"updated_at": timezone.now(), **changes})
            if updated == 0:
                raise NotFound(f"User with id {user_id} not found.")
            return User.objects.get(pk=user_id)

    def append_attachment(
        self,
        case_id: Any,
        metadata: Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> Attachment:
        Attachment = self._attachment_model()
        with bounded_atomic(timeout):
            return Attachment.objects.create(case_id=case_id, **dict(metadata))

    def increment_case_views(self, case_id: Any, *, timeout: float | None = None) -> Case:
        """Bump ``view_count`` of a public case; non-public cases are not found."""
        Case = self._case_model()
        with bounded_atomic(timeout):
            try:
                updated = Case.objects.filter(pk=case_id, is_public=True).update(
                    view_count=F("view_count") + 1,
                )
            except (ValueError, TypeError):
                updated = 0
            if updated == 0:
                raise NotFound(f"Public case with id {case_id} not found.")
            return Case.objects.get(pk=case_id)

    # ── Queries ─────────────────────────────────────────────────────

    def superadmin_exists(self) -> bool:
        from accounts.models import Role

        with translate_db_errors():
            return self._user_model().objects.filter(role=Role.SUPERADMIN).exists()

    # ── Locks ───────────────────────────────────────────────────────

    def lock_superadmin_seeding(self) -> None:
        """Serialize Super Admin seeding until the surrounding transaction ends."""
        advisory_xact_lock(SUPERADMIN_SEED_LOCK_KEY)
