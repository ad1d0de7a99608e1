"""
Accounts app serializers.

Contains all Request and Response serializers for the accounts API.
Serializers handle field definitions, read/write constraints, and
basic shape validation.  **No business logic** lives here — role and
status rules are delegated to ``services.py`` and the authorization
policy.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  User Serializers
# ═══════════════════════════════════════════════════════════════════


class UserListSerializer(serializers.ModelSerializer):
    """Compact user row for the administrator user list."""

    class Meta:
        model = User
        fields = [
            "id",
            "phone_number",
            "full_name",
            "email",
            "role",
            "is_active",
            "total_cases_filed",
            "date_joined",
        ]
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Full user representation (used by retrieve, "me" and the role /
    status actions).
    """

    is_reviewer = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "phone_number",
            "full_name",
            "email",
            "address",
            "profile_picture_url",
            "role",
            "is_active",
            "is_reviewer",
            "total_cases_filed",
            "date_joined",
            "updated_at",
        ]
        read_only_fields = fields


class ChangeRoleSerializer(serializers.Serializer):
    """
    Body of ``PATCH /users/{id}/role/``.

    The value is checked against the ``Role`` enumeration by the
    service, so an unknown role yields the same ``invalid_argument``
    error whichever entry point is used.
    """

    role = serializers.CharField(
        help_text="One of USER, ADMIN, SUPERADMIN.",
    )


class ChangeStatusSerializer(serializers.Serializer):
    """Body of ``PATCH /users/{id}/status/``."""

    is_active = serializers.BooleanField(
        help_text="false deactivates the account, true re-activates it.",
    )


class MeUpdateSerializer(serializers.ModelSerializer):
    """
    Allows the authenticated user to update limited profile fields.
    Role, activation and phone number cannot be self-modified.
    """

    class Meta:
        model = User
        fields = [
            "full_name",
            "email",
            "address",
            "profile_picture_url",
        ]
