"""
Cases app URL configuration.

All routes are registered under the ``/api/cases/`` prefix.

Route Hierarchy
---------------
  GET  /api/cases/                         → my cases
  POST /api/cases/                         → submit a case
  GET  /api/cases/{id}/                    → case detail (owner / admin)

  ── Workflow @actions ───────────────────────────────────────────
  POST /api/cases/{id}/review/             → approve / reject (admin)
  POST /api/cases/{id}/resolve/            → resolve an approved case (admin)

  ── Collection @actions ─────────────────────────────────────────
  GET  /api/cases/all/?status=             → every case (admin)
  GET  /api/cases/public/                  → public feed
  GET  /api/cases/public/{id}/             → public detail (+1 view)

  ── Nested (under /cases/{case_pk}/) ────────────────────────────
  GET  /api/cases/{case_pk}/attachments/
  POST /api/cases/{case_pk}/attachments/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_nested.routers import NestedDefaultRouter

from .views import AttachmentViewSet, CaseViewSet

router = DefaultRouter()
router.register(
    prefix=r"cases",
    viewset=CaseViewSet,
    basename="case",
)

cases_router = NestedDefaultRouter(
    parent_router=router,
    parent_prefix=r"cases",
    lookup="case",
)
cases_router.register(
    prefix=r"attachments",
    viewset=AttachmentViewSet,
    basename="case-attachment",
)

urlpatterns = [
    path("", include(router.urls)),
    path("", include(cases_router.urls)),
]
