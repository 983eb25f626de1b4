"""
Reports app ViewSets.

Views are intentionally thin.  Every view follows the three-step
pattern:

    1. Parse / validate input via a serializer.
    2. Delegate all business logic to the appropriate service class.
    3. Serialize the result and return a DRF ``Response``.

Authorization (role, ownership, scope) is enforced inside the service
layer; the base permission class is ``IsAuthenticated``.

ViewSets
--------
- ``ReportViewSet``     — list / submit / detail / history / stats and the
                          staff workflow actions.
- ``DepartmentViewSet`` — department directory and category routing.
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from .serializers import (
    AssignWorkerSerializer,
    ClassifySerializer,
    DepartmentResolutionSerializer,
    DepartmentSerializer,
    NoteSerializer,
    ReassignSerializer,
    ReportDetailSerializer,
    ReportFilterSerializer,
    ReportHistoryEntrySerializer,
    ReportListSerializer,
    ReportStatsSerializer,
    ReportSubmitSerializer,
    StatsQuerySerializer,
    StatusUpdateSerializer,
)
from .services import (
    AssignmentResolverService,
    DepartmentService,
    ReportQueryService,
    ReportStatsService,
    ReportSubmissionService,
    ReportWorkflowService,
)


class ReportViewSet(viewsets.ViewSet):
    """
    Central ViewSet for the reports app.

    Uses ``viewsets.ViewSet`` so every action is explicitly defined;
    reports are never edited or deleted through generic CRUD.
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def _detail_response(self, request: Request, report) -> Response:
        report = ReportQueryService.get_report_detail(request.user, report.pk)
        return Response(ReportDetailSerializer(report).data, status=status.HTTP_200_OK)

    # ── Read ─────────────────────────────────────────────────────────

    @extend_schema(
        summary="List reports",
        description="Reports visible to the caller's role, newest first.",
        parameters=[ReportFilterSerializer],
        responses={200: OpenApiResponse(response=ReportListSerializer(many=True), description="Scoped reports.")},
        tags=["Reports"],
    )
    def list(self, request: Request) -> Response:
        filter_serializer = ReportFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        qs = ReportQueryService.get_filtered_queryset(request.user, filter_serializer.validated_data)
        return Response(ReportListSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Submit a report",
        description=(
            "Multipart submission with optional image / audio files. Media "
            "upload, location capture and priority classification failures "
            "never block the submission."
        ),
        request=ReportSubmitSerializer,
        responses={
            201: OpenApiResponse(response=ReportDetailSerializer, description="Report submitted."),
            400: OpenApiResponse(description="Validation error."),
            401: OpenApiResponse(description="Not authenticated."),
        },
        tags=["Reports"],
    )
    def create(self, request: Request) -> Response:
        serializer = ReportSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = ReportSubmissionService.submit(request.user, serializer.validated_data)
        # Staff scopes may exclude reports they filed themselves.
        return Response(ReportDetailSerializer(report).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve a report",
        responses={
            200: OpenApiResponse(response=ReportDetailSerializer, description="Report with history."),
            404: OpenApiResponse(description="Report not found or not visible."),
        },
        tags=["Reports"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        report = ReportQueryService.get_report_detail(request.user, pk)
        return Response(ReportDetailSerializer(report).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Report audit log",
        responses={200: ReportHistoryEntrySerializer(many=True)},
        tags=["Reports"],
    )
    @action(detail=True, methods=["get"], url_path="history")
    def history(self, request: Request, pk: str = None) -> Response:
        entries = ReportQueryService.get_history(request.user, pk)
        return Response(ReportHistoryEntrySerializer(entries, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Dashboard statistics",
        description="Aggregates and daily trend over the caller's visible reports.",
        parameters=[
            OpenApiParameter(name="days", type=int, location=OpenApiParameter.QUERY, description="Trend length in days (1-365, default 30)."),
        ],
        responses={200: ReportStatsSerializer},
        tags=["Reports"],
    )
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request: Request) -> Response:
        query = StatsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = ReportStatsService.get_dashboard(request.user, days=query.validated_data["days"])
        return Response(ReportStatsSerializer(data).data, status=status.HTTP_200_OK)

    # ── Workflow @actions ────────────────────────────────────────────

    @extend_schema(
        summary="Change report status",
        request=StatusUpdateSerializer,
        responses={
            200: OpenApiResponse(response=ReportDetailSerializer, description="Status updated."),
            403: OpenApiResponse(description="Supervisors and administrators only."),
            409: OpenApiResponse(description="Status would move backwards."),
        },
        tags=["Reports – Workflow"],
    )
    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request: Request, pk: str = None) -> Response:
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = ReportWorkflowService.update_status(
            pk,
            serializer.validated_data["status"],
            request.user,
            note=serializer.validated_data["note"],
        )
        return self._detail_response(request, report)

    @extend_schema(
        summary="Add a note",
        request=NoteSerializer,
        responses={200: ReportDetailSerializer},
        tags=["Reports – Workflow"],
    )
    @action(detail=True, methods=["post"], url_path="notes")
    def add_note(self, request: Request, pk: str = None) -> Response:
        serializer = NoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = ReportWorkflowService.add_note(pk, serializer.validated_data["note"], request.user)
        return self._detail_response(request, report)

    @extend_schema(
        summary="Classify a report",
        request=ClassifySerializer,
        responses={200: ReportDetailSerializer},
        tags=["Reports – Workflow"],
    )
    @action(detail=True, methods=["post"], url_path="classify")
    def classify(self, request: Request, pk: str = None) -> Response:
        serializer = ClassifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = ReportWorkflowService.classify(
            pk,
            serializer.validated_data["classification"],
            request.user,
            note=serializer.validated_data["note"],
        )
        return self._detail_response(request, report)

    @extend_schema(
        summary="Reassign department / supervisor",
        request=ReassignSerializer,
        responses={
            200: OpenApiResponse(response=ReportDetailSerializer, description="Reassigned."),
            403: OpenApiResponse(description="Administrators only."),
            404: OpenApiResponse(description="Unknown report, department or supervisor."),
        },
        tags=["Reports – Assignment"],
    )
    @action(detail=True, methods=["post"], url_path="reassign")
    def reassign(self, request: Request, pk: str = None) -> Response:
        serializer = ReassignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        report = AssignmentResolverService.reassign(
            pk, data["assigned_dept"], data["assigned_to"], request.user, note=data["note"],
        )
        return self._detail_response(request, report)

    @extend_schema(
        summary="Assign a worker",
        request=AssignWorkerSerializer,
        responses={
            200: OpenApiResponse(response=ReportDetailSerializer, description="Worker assigned."),
            403: OpenApiResponse(description="Caller is not the report's supervisor."),
            404: OpenApiResponse(description="Unknown report or worker."),
        },
        tags=["Reports – Assignment"],
    )
    @action(detail=True, methods=["post"], url_path="assign-worker")
    def assign_worker(self, request: Request, pk: str = None) -> Response:
        serializer = AssignWorkerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        report = AssignmentResolverService.assign_worker(
            pk, data["worker_id"], request.user, note=data["note"],
        )
        return self._detail_response(request, report)


class DepartmentViewSet(viewsets.ViewSet):
    """/api/departments/ — read-only directory plus category routing."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List departments",
        responses={200: DepartmentSerializer(many=True)},
        tags=["Departments"],
    )
    def list(self, request: Request) -> Response:
        departments = DepartmentService.list_departments(request.user)
        return Response(DepartmentSerializer(departments, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Resolve a category to its department",
        parameters=[
            OpenApiParameter(name="issue_type", type=str, location=OpenApiParameter.QUERY, required=True, description="Issue category key."),
        ],
        responses={200: DepartmentResolutionSerializer},
        tags=["Departments"],
    )
    @action(detail=False, methods=["get"], url_path="resolve")
    def resolve(self, request: Request) -> Response:
        issue_type = request.query_params.get("issue_type", "")
        resolution = AssignmentResolverService.resolve_department(issue_type)
        return Response(DepartmentResolutionSerializer(resolution._asdict()).data, status=status.HTTP_200_OK)
