"""
Tests for the shared domain plumbing in ``core.domain`` and the core
endpoints (dashboard, notifications).
"""

from __future__ import annotations

from unittest import mock

from django.db import OperationalError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import Role, User
from cases.models import Case, CaseStatus, MainCategory
from core.domain.exception_handler import domain_exception_handler
from core.domain.exceptions import (
    Conflict,
    InvalidArgument,
    InvalidState,
    NotFound,
    PermissionDenied,
    Unavailable,
)
from core.domain.notifications import NotificationService
from core.domain.transactions import (
    advisory_xact_lock,
    bounded_atomic,
    compare_and_swap,
    translate_db_errors,
)
from core.models import Notification, NotificationType


def _user(phone: str, role: str = Role.USER) -> User:
    return User.objects.create_user(username=phone, password="TestPass123!", phone_number=phone, role=role)


def _case(owner: User, **fields) -> Case:
    defaults = {
        "main_category": MainCategory.CORRUPTION,
        "case_title": "Bribe demanded for a ration card",
        "name": "Meena",
        "phone_number": owner.phone_number,
        "case_description": "The clerk asked for money to process the application.",
    }
    defaults.update(fields)
    return Case.objects.create(user=owner, **defaults)


class TestDomainExceptionHandler(SimpleTestCase):

    def test_status_codes(self):
        cases = [
            (InvalidArgument(), 400),
            (PermissionDenied(reason="insufficient-role"), 403),
            (NotFound(), 404),
            (InvalidState(current="REJECTED", target="APPROVED"), 409),
            (Conflict(), 409),
            (Unavailable(), 503),
        ]
        for exc, expected in cases:
            with self.subTest(exc=type(exc).__name__):
                response = domain_exception_handler(exc, {})
                self.assertEqual(response.status_code, expected)
                self.assertEqual(response.data["code"], exc.code)
                self.assertIs(response.data["success"], False)

    def test_permission_denied_carries_reason(self):
        response = domain_exception_handler(PermissionDenied(reason="self-deactivation"), {})
        self.assertEqual(response.data["reason"], "self-deactivation")

    def test_retryable_errors_set_retry_after(self):
        for exc in (Conflict(), Unavailable()):
            with self.subTest(exc=type(exc).__name__):
                self.assertEqual(domain_exception_handler(exc, {})["Retry-After"], "1")
        self.assertFalse(domain_exception_handler(InvalidState(), {}).has_header("Retry-After"))

    def test_foreign_exceptions_are_left_alone(self):
        self.assertIsNone(domain_exception_handler(ValueError("boom"), {}))

    def test_invalid_state_message(self):
        exc = InvalidState(current="REJECTED", target="APPROVED", reason="Already reviewed")
        self.assertEqual(
            str(exc),
            "Invalid state transition from 'REJECTED' to 'APPROVED' (Already reviewed).",
        )


class TestTransactions(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.owner = _user("9600000001")

    def test_database_errors_become_unavailable(self):
        with self.assertLogs("core.domain.transactions", level="WARNING"):
            with self.assertRaises(Unavailable) as ctx:
                with translate_db_errors():
                    raise OperationalError("could not connect")
        self.assertTrue(ctx.exception.retryable)

    def test_bounded_atomic_rolls_back(self):
        with self.assertRaises(InvalidArgument):
            with bounded_atomic(timeout=1.0):
                _case(self.owner)
                raise InvalidArgument("abort")
        self.assertFalse(Case.objects.exists())

    def test_compare_and_swap(self):
        case = _case(self.owner)

        updated = compare_and_swap(
            Case, pk=case.pk, field="status", expected=CaseStatus.PENDING,
            changes={"status": CaseStatus.APPROVED, "is_public": True},
        )
        self.assertEqual(updated.status, CaseStatus.APPROVED)

        with self.assertRaises(Conflict):
            compare_and_swap(
                Case, pk=case.pk, field="status", expected=CaseStatus.PENDING,
                changes={"status": CaseStatus.REJECTED},
            )
        with self.assertRaises(NotFound):
            compare_and_swap(
                Case, pk=999_999, field="status", expected=CaseStatus.PENDING,
                changes={"status": CaseStatus.REJECTED},
            )

    def test_advisory_lock_is_a_no_op_off_postgres(self):
        with bounded_atomic():
            advisory_xact_lock(42)

    def test_advisory_lock_on_postgres(self):
        with mock.patch("core.domain.transactions.connection") as conn:
            conn.vendor = "postgresql"
            advisory_xact_lock(42)

        cursor = conn.cursor.return_value.__enter__.return_value
        cursor.execute.assert_called_once_with("SELECT pg_advisory_xact_lock(%s)", [42])


class TestNotificationDispatch(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.recipient = _user("9600000002")

    def test_create_renders_template(self):
        case = _case(self.recipient)
        [notification] = NotificationService.create(
            actor_id=1,
            target_id=case.pk,
            event_kind=NotificationType.CASE_APPROVED,
            recipients=self.recipient,
            related_object=case,
        )
        self.assertEqual(notification.title, "Case Approved")
        self.assertIn(f"#{case.pk}", notification.message)
        self.assertEqual(notification.content_object, case)

    def test_unknown_event_falls_back_to_admin_alert(self):
        [notification] = NotificationService.create(
            actor_id=1, target_id=7, event_kind="ESCALATED", recipients=[self.recipient],
        )
        self.assertEqual(notification.notification_type, NotificationType.ADMIN_ALERT)
        self.assertEqual(notification.title, "Escalated")

    def test_empty_recipients(self):
        result = NotificationService.dispatch(
            actor_id=1, target_id=7, event_kind=NotificationType.CASE_SUBMITTED, recipients=[],
        )
        self.assertEqual(result, [])
        self.assertFalse(Notification.objects.exists())

    def test_dispatch_swallows_failures(self):
        with self.assertLogs("core.domain.notifications", level="ERROR"):
            result = NotificationService.dispatch(
                actor_id=1, target_id=7, event_kind=NotificationType.CASE_SUBMITTED, recipients=None,
            )
        self.assertEqual(result, [])


class TestCoreEndpoints(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.citizen = _user("9600000010")
        cls.admin = _user("9600000011", Role.ADMIN)
        _case(cls.citizen)
        _case(cls.citizen, status=CaseStatus.APPROVED, is_public=True)
        _case(cls.citizen, status=CaseStatus.RESOLVED, is_public=True)
        _case(cls.citizen, status=CaseStatus.REJECTED, rejection_reason="Duplicate")

    def _client(self, user: User) -> APIClient:
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")
        return client

    def test_dashboard_stats(self):
        resp = self._client(self.admin).get(reverse("core:dashboard-stats"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(
            resp.data,
            {
                "total_cases": 4,
                "pending_cases": 1,
                "approved_cases": 1,
                "rejected_cases": 1,
                "resolved_cases": 1,
                "public_cases": 2,
            },
        )

    def test_dashboard_forbidden_for_citizen(self):
        resp = self._client(self.citizen).get(reverse("core:dashboard-stats"))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_notifications_list_and_mark_read(self):
        NotificationService.create(
            actor_id=self.admin.pk, target_id=1,
            event_kind=NotificationType.CASE_APPROVED, recipients=self.citizen,
        )
        NotificationService.create(
            actor_id=self.admin.pk, target_id=2,
            event_kind=NotificationType.CASE_REJECTED, recipients=[self.citizen, self.admin],
        )
        client = self._client(self.citizen)

        resp = client.get(reverse("core:notification-list"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 2)

        first_id = resp.data[0]["id"]
        resp = client.post(reverse("core:notification-mark-as-read", args=[first_id]))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data["is_read"])

        resp = client.post(reverse("core:notification-mark-as-read", args=[first_id]))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        resp = client.get(reverse("core:notification-list"), {"unread": "true"})
        self.assertEqual(len(resp.data), 1)

    def test_cannot_read_someone_elses_notification(self):
        [notification] = NotificationService.create(
            actor_id=self.citizen.pk, target_id=1,
            event_kind=NotificationType.CASE_SUBMITTED, recipients=self.admin,
        )
        resp = self._client(self.citizen).post(
            reverse("core:notification-mark-as-read", args=[notification.pk]),
        )
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
