"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_user`` factory fixture for creating test users.
  - ``create_case`` factory fixture for creating PENDING cases.
  - ``auth_header`` fixture for authenticated requests (JWT).
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_user(db):
    """
    Factory fixture that creates a user with sensible defaults.

    Usage::

        def test_something(create_user):
            citizen = create_user()
            admin = create_user(role=Role.ADMIN)
            owner = create_user(role=Role.SUPERADMIN, full_name="Owner")
    """
    from accounts.models import Role, User

    _counter = 0

    def _factory(
        *,
        phone_number: str | None = None,
        role: str = Role.USER,
        is_active: bool = True,
        password: str = "TestPass123!",
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if phone_number is None:
            phone_number = f"98{_counter:08d}"
        kwargs.setdefault("username", phone_number)
        kwargs.setdefault("full_name", f"Test User {_counter}")
        return User.objects.create_user(
            password=password,
            phone_number=phone_number,
            role=role,
            is_active=is_active,
            **kwargs,
        )

    return _factory


@pytest.fixture()
def create_case(db):
    """
    Factory fixture that creates a PENDING case owned by ``owner``.

    Goes straight to the ORM; use ``CaseLifecycleService.submit_case``
    when the test is about submission itself.
    """
    from cases.models import Case, MainCategory

    def _factory(owner, **fields) -> Case:
        defaults = {
            "main_category": MainCategory.BANKING,
            "case_title": "ATM debited without dispensing cash",
            "name": owner.full_name or "Citizen",
            "phone_number": owner.phone_number,
            "case_description": "Amount debited but no cash dispensed.",
        }
        defaults.update(fields)
        return Case.objects.create(user=owner, **defaults)

    return _factory


@pytest.fixture()
def auth_header(create_user):
    """
    Returns a helper function that creates a user and returns an
    ``Authorization`` header dict with a valid JWT access token.

    Usage::

        def test_protected(auth_header, api_client):
            header = auth_header(role=Role.ADMIN)
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
            resp = api_client.get("/api/core/dashboard/")
            assert resp.status_code == 200

    The returned dict looks like::

        {"Authorization": "Bearer eyJ..."}
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(**user_kwargs) -> dict[str, str]:
        user = create_user(**user_kwargs)
        token = AccessToken.for_user(user)
        return {"Authorization": f"Bearer {token}"}

    return _make
