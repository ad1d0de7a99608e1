"""
Smoke tests — verify that Django boots, URL routing resolves, and
the core domain modules are importable.

These tests do NOT require a database; they just prove the plumbing
works.
"""

from __future__ import annotations

import pytest
from django.urls import resolve, reverse


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure all top-level app URL namespaces resolve without 404."""

    EXPECTED_URLS = [
        # (url_name, expected_path)
        ("case-list",                 "/api/cases/"),
        ("case-all",                  "/api/cases/all/"),
        ("case-public",               "/api/cases/public/"),
        ("accounts:me",               "/api/accounts/me/"),
        ("accounts:user-list",        "/api/accounts/users/"),
        ("core:dashboard-stats",      "/api/core/dashboard/"),
        ("core:notification-list",    "/api/core/notifications/"),
    ]

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_reverses(self, url_name: str, expected_path: str):
        """Named URL reverses to the expected path."""
        assert reverse(url_name) == expected_path

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_resolve_matches_view(self, url_name: str, expected_path: str):
        """Path resolves to a view function (not a 404)."""
        match = resolve(expected_path)
        assert match.func is not None

    def test_nested_and_detail_routes(self):
        assert reverse("case-review", args=[5]) == "/api/cases/5/review/"
        assert reverse("case-resolve", args=[5]) == "/api/cases/5/resolve/"
        assert reverse("case-public-detail", kwargs={"public_pk": 5}) == "/api/cases/public/5/"
        assert reverse("case-attachment-list", kwargs={"case_pk": 5}) == "/api/cases/5/attachments/"
        assert reverse("accounts:user-change-role", args=[3]) == "/api/accounts/users/3/role/"
        assert reverse("accounts:user-change-status", args=[3]) == "/api/accounts/users/3/status/"
        assert reverse("core:notification-mark-as-read", args=[9]) == "/api/core/notifications/9/read/"


# ════════════════════════════════════════════════════════════════════
#  Core Domain Module Import Tests
# ════════════════════════════════════════════════════════════════════

class TestCoreDomainImports:
    """Verify that shared domain utility modules are importable."""

    def test_import_exceptions(self):
        from core.domain.exceptions import (
            Conflict,
            DomainError,
            InvalidArgument,
            InvalidState,
            NotFound,
            PermissionDenied,
            Unavailable,
        )
        for exc_class in (Conflict, InvalidArgument, InvalidState, NotFound, PermissionDenied, Unavailable):
            assert issubclass(exc_class, DomainError)
        assert Conflict.retryable and Unavailable.retryable
        assert not InvalidState.retryable

    def test_import_notifications(self):
        from core.domain.notifications import NotificationService
        assert hasattr(NotificationService, "dispatch")

    def test_import_transactions(self):
        from core.domain.transactions import (
            bounded_atomic,
            compare_and_swap,
        )
        assert callable(bounded_atomic)
        assert callable(compare_and_swap)

    def test_import_access(self):
        from core.domain.access import Action, decide, require
        assert callable(decide)
        assert callable(require)
        assert len(Action) == 8


# ════════════════════════════════════════════════════════════════════
#  Exception Behaviour Tests
# ════════════════════════════════════════════════════════════════════

class TestDomainExceptions:
    """Unit tests for domain exception classes."""

    def test_domain_error_message(self):
        from core.domain.exceptions import DomainError
        err = DomainError("test message")
        assert str(err) == "test message"

    def test_invalid_state_structured(self):
        from core.domain.exceptions import InvalidState
        err = InvalidState(
            current="REJECTED",
            target="RESOLVED",
            reason="Only approved cases can be resolved",
        )
        assert "REJECTED" in str(err)
        assert "RESOLVED" in str(err)
        assert err.current == "REJECTED"
        assert err.target == "RESOLVED"

    def test_invalid_state_plain_message(self):
        from core.domain.exceptions import InvalidState
        err = InvalidState("Cannot resolve case.")
        assert str(err) == "Cannot resolve case."

    def test_permission_denied_reason(self):
        from core.domain.exceptions import PermissionDenied
        err = PermissionDenied(reason="not-case-owner")
        assert err.reason == "not-case-owner"
        assert err.code == "permission_denied"
