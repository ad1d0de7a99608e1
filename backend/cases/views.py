"""
Cases app ViewSets.

Architecture: Views are intentionally thin.
Every view follows the strict three-step pattern:

    1. Parse / validate input via a serializer.
    2. Delegate all business logic to the appropriate service class.
    3. Serialize the result and return a DRF ``Response``.

Domain exceptions raised by the services (``NotFound``,
``PermissionDenied``, ``InvalidState``, ``Conflict`` …) are rendered by
``core.domain.exception_handler``; views never catch them.

ViewSets
--------
- ``CaseViewSet``        — own cases, submission, review, resolution,
                           the admin list and the public feed.
- ``AttachmentViewSet``  — ``/api/cases/{case_pk}/attachments/``.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from .serializers import (
    AttachmentCreateSerializer,
    AttachmentSerializer,
    CaseDetailSerializer,
    CaseListSerializer,
    CaseReviewSerializer,
    CaseSubmitSerializer,
    PublicCaseSerializer,
)
from .services import CaseLifecycleService, CaseQueryService

logger = logging.getLogger(__name__)


class CaseViewSet(viewsets.ViewSet):
    """
    Central ViewSet for the cases app.

    Uses ``viewsets.ViewSet`` (not ``ModelViewSet``) so every action is
    explicitly defined, preventing accidental exposure of unintended
    CRUD operations.

    Permission Strategy
    -------------------
    The base permission is ``IsAuthenticated`` (``AllowAny`` for the
    public feed).  Role and ownership checks are enforced exclusively
    inside the service layer — never in the view.
    """

    permission_classes = [IsAuthenticated]

    # ── Own cases ────────────────────────────────────────────────────

    @extend_schema(
        summary="List my cases",
        responses={200: CaseListSerializer(many=True)},
        tags=["Cases"],
    )
    def list(self, request: Request) -> Response:
        """GET /api/cases/"""
        qs = CaseQueryService.list_own_cases(request.user)
        return Response(CaseListSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Submit a case",
        request=CaseSubmitSerializer,
        responses={
            201: OpenApiResponse(response=CaseDetailSerializer, description="Case filed as PENDING."),
            400: OpenApiResponse(description="Validation error."),
            403: OpenApiResponse(description="Account is inactive."),
        },
        tags=["Cases"],
    )
    def create(self, request: Request) -> Response:
        """POST /api/cases/"""
        serializer = CaseSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        attachments = fields.pop("attachments", [])

        case = CaseLifecycleService().submit_case(request.user, fields, attachments)
        return Response(CaseDetailSerializer(case).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve case details",
        responses={
            200: CaseDetailSerializer,
            403: OpenApiResponse(description="Neither the owner nor an administrator."),
            404: OpenApiResponse(description="Case not found."),
        },
        tags=["Cases"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        """GET /api/cases/{id}/"""
        case = CaseQueryService().get_case(request.user, pk)
        return Response(CaseDetailSerializer(case).data, status=status.HTTP_200_OK)

    # ── Review workflow ──────────────────────────────────────────────

    @extend_schema(
        summary="Review a pending case",
        description="Approve or reject a PENDING case. Administrators only.",
        request=CaseReviewSerializer,
        responses={
            200: CaseDetailSerializer,
            400: OpenApiResponse(description="Unknown decision, or rejection without a reason."),
            403: OpenApiResponse(description="Not an active administrator."),
            404: OpenApiResponse(description="Case not found."),
            409: OpenApiResponse(description="Case already reviewed, or a concurrent review won."),
        },
        tags=["Cases – Workflow"],
    )
    @action(detail=True, methods=["post"], url_path="review")
    def review(self, request: Request, pk: str = None) -> Response:
        """POST /api/cases/{id}/review/"""
        serializer = CaseReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        case = CaseLifecycleService().review_case(
            request.user,
            pk,
            data["decision"],
            comments=data.get("comments"),
            rejection_reason=data.get("rejection_reason"),
        )
        return Response(CaseDetailSerializer(case).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Resolve an approved case",
        request=None,
        responses={
            200: CaseDetailSerializer,
            403: OpenApiResponse(description="Not an active administrator."),
            404: OpenApiResponse(description="Case not found."),
            409: OpenApiResponse(description="Case is not APPROVED."),
        },
        tags=["Cases – Workflow"],
    )
    @action(detail=True, methods=["post"], url_path="resolve")
    def resolve(self, request: Request, pk: str = None) -> Response:
        """POST /api/cases/{id}/resolve/"""
        case = CaseLifecycleService().resolve_case(request.user, pk)
        return Response(CaseDetailSerializer(case).data, status=status.HTTP_200_OK)

    # ── Administrator list ───────────────────────────────────────────

    @extend_schema(
        summary="List all cases",
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="Filter by case status."),
        ],
        responses={
            200: CaseListSerializer(many=True),
            403: OpenApiResponse(description="Not an administrator."),
        },
        tags=["Cases"],
    )
    @action(detail=False, methods=["get"], url_path="all", url_name="all")
    def all_cases(self, request: Request) -> Response:
        """GET /api/cases/all/?status=PENDING"""
        qs = CaseQueryService.list_all_cases(
            request.user, status=request.query_params.get("status") or None,
        )
        return Response(CaseListSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    # ── Public feed ──────────────────────────────────────────────────

    @extend_schema(
        summary="Public cases",
        responses={200: PublicCaseSerializer(many=True)},
        tags=["Cases – Public"],
    )
    @action(detail=False, methods=["get"], url_path="public",
            authentication_classes=[], permission_classes=[AllowAny])
    def public(self, request: Request) -> Response:
        """GET /api/cases/public/"""
        qs = CaseQueryService.list_public_cases()
        return Response(PublicCaseSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Public case detail",
        description="Return one public case and count the view.",
        responses={
            200: PublicCaseSerializer,
            404: OpenApiResponse(description="No public case with this id."),
        },
        tags=["Cases – Public"],
    )
    @action(
        detail=False,
        methods=["get"],
        url_path=r"public/(?P<public_pk>[^/.]+)",
        url_name="public-detail",
        authentication_classes=[],
        permission_classes=[AllowAny],
    )
    def public_detail(self, request: Request, public_pk: str = None) -> Response:
        """GET /api/cases/public/{id}/"""
        case = CaseLifecycleService().record_view(public_pk)
        return Response(PublicCaseSerializer(case).data, status=status.HTTP_200_OK)


class AttachmentViewSet(viewsets.ViewSet):
    """
    /api/cases/{case_pk}/attachments/

    Owners add attachment metadata while their case is PENDING; owners
    and administrators can list them.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List case attachments",
        responses={200: AttachmentSerializer(many=True)},
        tags=["Cases – Attachments"],
    )
    def list(self, request: Request, case_pk: str = None) -> Response:
        qs = CaseQueryService().list_attachments(request.user, case_pk)
        return Response(AttachmentSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Add an attachment",
        request=AttachmentCreateSerializer,
        responses={
            201: AttachmentSerializer,
            403: OpenApiResponse(description="Not the case owner, or account inactive."),
            404: OpenApiResponse(description="Case not found."),
            409: OpenApiResponse(description="Case is no longer PENDING."),
        },
        tags=["Cases – Attachments"],
    )
    def create(self, request: Request, case_pk: str = None) -> Response:
        serializer = AttachmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attachment = CaseLifecycleService().add_attachment(
            request.user, case_pk, serializer.validated_data,
        )
        return Response(AttachmentSerializer(attachment).data, status=status.HTTP_201_CREATED)
