"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.  **No business logic** resides here.

View Map
--------
- ``MeView``       — GET / PATCH /me/
- ``UserViewSet``  — /users/  (list, retrieve, role, status)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.domain.exceptions import InvalidArgument

from .serializers import (
    ChangeRoleSerializer,
    ChangeStatusSerializer,
    MeUpdateSerializer,
    UserDetailSerializer,
    UserListSerializer,
)
from .services import CurrentUserService, UserManagementService

_TRUE = {"1", "true", "yes"}
_FALSE = {"0", "false", "no"}


def _parse_bool_param(raw: str | None, name: str) -> bool | None:
    if raw is None or raw == "":
        return None
    lowered = raw.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise InvalidArgument(f"Query parameter '{name}' must be true or false.")


# ═══════════════════════════════════════════════════════════════════
#  Current User
# ═══════════════════════════════════════════════════════════════════


class MeView(APIView):
    """
    GET  /api/accounts/me/  → Retrieve current user profile.
    PATCH /api/accounts/me/ → Update own profile fields.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user",
        responses={200: UserDetailSerializer},
        tags=["Accounts"],
    )
    def get(self, request: Request) -> Response:
        user = CurrentUserService.get_profile(request.user)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update own profile",
        request=MeUpdateSerializer,
        responses={200: UserDetailSerializer},
        tags=["Accounts"],
    )
    def patch(self, request: Request) -> Response:
        serializer = MeUpdateSerializer(instance=request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = CurrentUserService.update_profile(request.user, serializer.validated_data)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  User Management ViewSet
# ═══════════════════════════════════════════════════════════════════


class UserViewSet(viewsets.ViewSet):
    """
    /api/accounts/users/

    Administrative user management.  Listing is open to ADMIN and
    SUPERADMIN; role and status changes are SUPERADMIN-only and subject
    to the self-deactivation and peer-protection rules.

    All heavy lifting is delegated to ``UserManagementService``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List users",
        parameters=[
            OpenApiParameter(name="role", type=str, required=False, description="USER, ADMIN or SUPERADMIN."),
            OpenApiParameter(name="is_active", type=bool, required=False),
        ],
        responses={200: UserListSerializer(many=True)},
        tags=["Accounts"],
    )
    def list(self, request: Request) -> Response:
        """GET /api/accounts/users/"""
        users = UserManagementService().list_users(
            request.user,
            role=request.query_params.get("role") or None,
            is_active=_parse_bool_param(request.query_params.get("is_active"), "is_active"),
        )
        return Response(UserListSerializer(users, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Retrieve user",
        responses={200: UserDetailSerializer},
        tags=["Accounts"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        """GET /api/accounts/users/{id}/"""
        user = UserManagementService().get_user(request.user, pk)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Change a user's role",
        request=ChangeRoleSerializer,
        responses={
            200: UserDetailSerializer,
            400: OpenApiResponse(description="Unknown role."),
            403: OpenApiResponse(description="Not a Super Admin, or target is another Super Admin."),
            404: OpenApiResponse(description="No such user."),
        },
        tags=["Accounts"],
    )
    @action(detail=True, methods=["patch"], url_path="role")
    def change_role(self, request: Request, pk: str = None) -> Response:
        """PATCH /api/accounts/users/{id}/role/"""
        serializer = ChangeRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserManagementService().change_user_role(
            request.user, pk, serializer.validated_data["role"],
        )
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Activate or deactivate a user",
        request=ChangeStatusSerializer,
        responses={
            200: UserDetailSerializer,
            403: OpenApiResponse(description="Self-deactivation, peer protection or insufficient role."),
            404: OpenApiResponse(description="No such user."),
        },
        tags=["Accounts"],
    )
    @action(detail=True, methods=["patch"], url_path="status")
    def change_status(self, request: Request, pk: str = None) -> Response:
        """PATCH /api/accounts/users/{id}/status/"""
        serializer = ChangeStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserManagementService().change_user_active_status(
            request.user, pk, serializer.validated_data["is_active"],
        )
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)
