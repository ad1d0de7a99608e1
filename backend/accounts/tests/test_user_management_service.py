"""
Service-level tests for ``UserManagementService``.

Covers the governance rules around roles and activation: the
super-admin may change anyone except another super-admin, nobody can
deactivate themselves, and every successful change notifies the target
without a broken notifier being able to undo it.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase

from accounts.models import Role
from accounts.services import UserManagementService
from core.domain.access import DenyReason
from core.domain.exceptions import InvalidArgument, NotFound, PermissionDenied
from core.domain.notifications import NotificationService
from core.models import Notification, NotificationType

User = get_user_model()


class _BrokenNotifier(NotificationService):
    @classmethod
    def create(cls, **kwargs):
        raise RuntimeError("notification backend down")


def _user(phone: str, role: str = Role.USER, **kwargs) -> User:
    return User.objects.create_user(
        username=phone,
        password="TestPass123!",
        phone_number=phone,
        role=role,
        **kwargs,
    )


class TestChangeUserRole(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.superadmin = _user("9000000001", Role.SUPERADMIN, full_name="Owner")
        cls.other_superadmin = _user("9000000002", Role.SUPERADMIN)
        cls.admin = _user("9000000003", Role.ADMIN)
        cls.citizen = _user("9000000004")

    def setUp(self):
        self.service = UserManagementService()

    def test_superadmin_promotes_user_to_admin(self):
        updated = self.service.change_user_role(self.superadmin, self.citizen.pk, Role.ADMIN)

        self.assertEqual(updated.role, Role.ADMIN)
        self.citizen.refresh_from_db()
        self.assertEqual(self.citizen.role, Role.ADMIN)
        notification = Notification.objects.get(recipient=self.citizen)
        self.assertEqual(notification.notification_type, NotificationType.ROLE_CHANGED)

    def test_superadmin_may_demote_itself(self):
        updated = self.service.change_user_role(self.superadmin, self.superadmin.pk, Role.ADMIN)
        self.assertEqual(updated.role, Role.ADMIN)

    def test_peer_superadmin_is_protected(self):
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.change_user_role(self.superadmin, self.other_superadmin.pk, Role.USER)

        self.assertEqual(ctx.exception.reason, DenyReason.SUPERADMIN_PEER_PROTECTION)
        self.other_superadmin.refresh_from_db()
        self.assertEqual(self.other_superadmin.role, Role.SUPERADMIN)
        self.assertFalse(Notification.objects.exists())

    def test_admin_cannot_change_roles(self):
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.change_user_role(self.admin, self.citizen.pk, Role.ADMIN)
        self.assertEqual(ctx.exception.reason, DenyReason.INSUFFICIENT_ROLE)

    def test_unknown_role_is_rejected_before_lookup(self):
        with self.assertRaises(InvalidArgument) as ctx:
            self.service.change_user_role(self.superadmin, 999_999, "OVERLORD")
        self.assertTrue(ctx.exception.__suppress_context__)

    def test_unknown_target(self):
        with self.assertRaises(NotFound):
            self.service.change_user_role(self.superadmin, 999_999, Role.ADMIN)

    def test_role_change_survives_broken_notifier(self):
        service = UserManagementService(notifier=_BrokenNotifier)
        with self.assertLogs("core.domain.notifications", level="ERROR"):
            updated = service.change_user_role(self.superadmin, self.citizen.pk, Role.ADMIN)

        self.assertEqual(updated.role, Role.ADMIN)
        self.citizen.refresh_from_db()
        self.assertEqual(self.citizen.role, Role.ADMIN)


class TestChangeUserActiveStatus(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.superadmin = _user("9100000001", Role.SUPERADMIN)
        cls.other_superadmin = _user("9100000002", Role.SUPERADMIN)
        cls.admin = _user("9100000003", Role.ADMIN)
        cls.citizen = _user("9100000004")

    def setUp(self):
        self.service = UserManagementService()

    def test_superadmin_deactivates_and_reactivates_user(self):
        updated = self.service.change_user_active_status(self.superadmin, self.citizen.pk, False)
        self.assertFalse(updated.is_active)

        updated = self.service.change_user_active_status(self.superadmin, self.citizen.pk, True)
        self.assertTrue(updated.is_active)
        self.assertEqual(
            Notification.objects.filter(
                recipient=self.citizen,
                notification_type=NotificationType.STATUS_CHANGED,
            ).count(),
            2,
        )

    def test_self_deactivation_is_refused(self):
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.change_user_active_status(self.superadmin, self.superadmin.pk, False)

        self.assertEqual(ctx.exception.reason, DenyReason.SELF_DEACTIVATION)
        self.superadmin.refresh_from_db()
        self.assertTrue(self.superadmin.is_active)

    def test_peer_superadmin_cannot_be_deactivated(self):
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.change_user_active_status(self.superadmin, self.other_superadmin.pk, False)

        self.assertEqual(ctx.exception.reason, DenyReason.SUPERADMIN_PEER_PROTECTION)
        self.other_superadmin.refresh_from_db()
        self.assertTrue(self.other_superadmin.is_active)

    def test_admin_cannot_deactivate_users(self):
        with self.assertRaises(PermissionDenied) as ctx:
            self.service.change_user_active_status(self.admin, self.citizen.pk, False)
        self.assertEqual(ctx.exception.reason, DenyReason.INSUFFICIENT_ROLE)

    def test_non_boolean_flag_is_rejected(self):
        with self.assertRaises(InvalidArgument):
            self.service.change_user_active_status(self.superadmin, self.citizen.pk, "false")

    def test_unknown_target(self):
        with self.assertRaises(NotFound):
            self.service.change_user_active_status(self.superadmin, 999_999, False)


class TestListUsers(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.admin = _user("9200000001", Role.ADMIN)
        cls.citizen = _user("9200000002")
        cls.inactive = _user("9200000003", is_active=False)

    def test_admin_lists_and_filters(self):
        service = UserManagementService()
        self.assertEqual(service.list_users(self.admin).count(), 3)
        self.assertEqual(list(service.list_users(self.admin, role=Role.ADMIN)), [self.admin])
        self.assertEqual(list(service.list_users(self.admin, is_active=False)), [self.inactive])

    def test_regular_user_cannot_list(self):
        with self.assertRaises(PermissionDenied):
            UserManagementService().list_users(self.citizen)

    def test_unknown_role_filter(self):
        with self.assertRaises(InvalidArgument):
            UserManagementService().list_users(self.admin, role="nobody")
