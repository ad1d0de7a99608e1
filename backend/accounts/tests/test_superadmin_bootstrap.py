"""
Tests for seeding the first Super Admin, through the service and the
``seed_superadmin`` management command.
"""

from __future__ import annotations

from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from accounts.models import Role
from accounts.services import SuperAdminBootstrapService, UserManagementService
from core.domain.exceptions import InvalidArgument, InvalidState
from core.domain.store import PortalStore

User = get_user_model()


class _RecordingStore(PortalStore):

    def __init__(self):
        self.calls = []

    def lock_superadmin_seeding(self):
        self.calls.append("lock")
        super().lock_superadmin_seeding()

    def superadmin_exists(self):
        self.calls.append("exists")
        return super().superadmin_exists()


class _ConcurrentSeedStore(PortalStore):
    """Another seeder commits while this one waits on the lock."""

    def lock_superadmin_seeding(self):
        super().lock_superadmin_seeding()
        User.objects.create_user(
            username="9700000099", phone_number="9700000099", role=Role.SUPERADMIN,
        )


class TestSuperAdminBootstrapService(TestCase):

    def setUp(self):
        self.service = SuperAdminBootstrapService()

    def test_seeds_first_superadmin(self):
        self.assertFalse(self.service.superadmin_exists())

        user = self.service.seed_first_superadmin(
            phone_number=" 9700000001 ",
            full_name="Portal Owner",
            address="Head Office",
        )

        self.assertEqual(user.role, Role.SUPERADMIN)
        self.assertEqual(user.phone_number, "9700000001")
        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_active)
        self.assertFalse(user.has_usable_password())
        self.assertTrue(self.service.superadmin_exists())

    def test_refuses_when_a_superadmin_exists(self):
        self.service.seed_first_superadmin(
            phone_number="9700000001", full_name="Owner", address="HQ",
        )
        with self.assertRaises(InvalidState):
            self.service.seed_first_superadmin(
                phone_number="9700000002", full_name="Usurper", address="Elsewhere",
            )
        self.assertEqual(User.objects.filter(role=Role.SUPERADMIN).count(), 1)

    def test_required_fields(self):
        with self.assertRaises(InvalidArgument):
            self.service.seed_first_superadmin(phone_number="9700000001", full_name="", address="HQ")

    def test_phone_number_already_registered(self):
        User.objects.create_user(username="9700000001", phone_number="9700000001")
        with self.assertRaises(InvalidArgument):
            self.service.seed_first_superadmin(
                phone_number="9700000001", full_name="Owner", address="HQ",
            )

    def test_bootstrap_reopens_after_sole_superadmin_steps_down(self):
        owner = self.service.seed_first_superadmin(
            phone_number="9700000001", full_name="Owner", address="HQ",
        )
        UserManagementService().change_user_role(owner, owner.pk, Role.ADMIN)
        self.assertFalse(self.service.superadmin_exists())

    def test_existence_check_runs_under_the_seeding_lock(self):
        store = _RecordingStore()
        SuperAdminBootstrapService(store=store).seed_first_superadmin(
            phone_number="9700000001", full_name="Owner", address="HQ",
        )
        self.assertEqual(store.calls, ["lock", "exists"])

    def test_seeder_that_waited_on_the_lock_sees_the_winner(self):
        service = SuperAdminBootstrapService(store=_ConcurrentSeedStore())

        with self.assertRaises(InvalidState):
            service.seed_first_superadmin(
                phone_number="9700000001", full_name="Owner", address="HQ",
            )

        self.assertEqual(User.objects.filter(role=Role.SUPERADMIN).count(), 1)
        self.assertFalse(User.objects.filter(phone_number="9700000001").exists())


class TestSeedSuperAdminCommand(TestCase):

    def test_creates_superadmin(self):
        out = StringIO()
        call_command(
            "seed_superadmin",
            "--phone", "9700000010",
            "--full-name", "Portal Owner",
            "--address", "Head Office",
            stdout=out,
        )
        self.assertIn("Super Admin created", out.getvalue())
        self.assertTrue(User.objects.filter(phone_number="9700000010", role=Role.SUPERADMIN).exists())

    def test_second_run_fails(self):
        call_command(
            "seed_superadmin", "--phone", "9700000010", "--full-name", "Owner", "--address", "HQ",
            stdout=StringIO(),
        )
        with self.assertRaises(CommandError):
            call_command(
                "seed_superadmin", "--phone", "9700000011", "--full-name", "Other", "--address", "HQ",
                stdout=StringIO(),
            )

    def test_phone_is_required(self):
        with self.assertRaises(CommandError):
            call_command("seed_superadmin", "--full-name", "Owner", "--address", "HQ")

    def test_check_flag(self):
        with self.assertRaises(CommandError):
            call_command("seed_superadmin", "--check")

        SuperAdminBootstrapService().seed_first_superadmin(
            phone_number="9700000010", full_name="Owner", address="HQ",
        )
        out = StringIO()
        call_command("seed_superadmin", "--check", stdout=out)
        self.assertIn("A Super Admin exists", out.getvalue())
