"""
Reports app URL configuration.

All routes are registered under the ``/api/`` prefix.

Route Hierarchy
---------------
  GET  /api/reports/                       → scoped list (filters via query params)
  POST /api/reports/                       → citizen submission (multipart)
  GET  /api/reports/{id}/                  → detail with history
  GET  /api/reports/{id}/history/          → audit log
  GET  /api/reports/stats/                 → dashboard aggregates

  ── Workflow @actions ───────────────────────────────────────────
  POST /api/reports/{id}/status/           → forward status change
  POST /api/reports/{id}/notes/            → append a note
  POST /api/reports/{id}/classify/         → staff classification

  ── Assignment @actions ─────────────────────────────────────────
  POST /api/reports/{id}/reassign/         → admin department / supervisor override
  POST /api/reports/{id}/assign-worker/    → supervisor dispatches a worker

  ── Departments ─────────────────────────────────────────────────
  GET  /api/departments/                   → directory
  GET  /api/departments/resolve/?issue_type=road
"""

from rest_framework.routers import DefaultRouter

from .views import DepartmentViewSet, ReportViewSet

router = DefaultRouter()
router.register(
    prefix=r"reports",
    viewset=ReportViewSet,
    basename="report",
)
router.register(
    prefix=r"departments",
    viewset=DepartmentViewSet,
    basename="department",
)

urlpatterns = router.urls
