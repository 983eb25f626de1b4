"""
Reports app Service Layer.

This module is the **single source of truth** for all business logic
in the ``reports`` app.  Views must remain thin: validate input via
serializers, call a service method, and return the result wrapped in
a DRF ``Response``.

Architecture
------------
- ``ReportQueryService``          — Role-scoped querysets, detail, history.
- ``ReportSubmissionService``     — Citizen submission with enrichment.
- ``AssignmentResolverService``   — Category routing, admin reassignment,
                                    supervisor → worker dispatch.
- ``ReportWorkflowService``       — Status engine, notes, classification.
- ``ReportStatsService``          — Pure dashboard aggregates.
- ``DepartmentService``           — Department directory.

Lifecycle
---------
  SUBMITTED → ACKNOWLEDGED → IN_PROGRESS → RESOLVED

Forward jumps and re-affirming the current status are allowed; moving
to an earlier status raises ``InvalidTransition``.

Every staff mutation runs inside one ``transaction.atomic()`` block that
locks the report row, writes the changed fields and appends exactly one
``ReportHistoryEntry``.  A failure rolls back both.

Permission constants used here (from ``core.permissions_constants.ReportsPerms``):
  - CAN_CHANGE_REPORT_STATUS → Supervisor, Admin
  - CAN_ADD_REPORT_NOTE      → Supervisor, Admin, Worker
  - CAN_CLASSIFY_REPORT      → Supervisor, Admin
  - CAN_REASSIGN_REPORT      → Admin
  - CAN_ASSIGN_WORKER        → Supervisor
  - CAN_VIEW_REPORT_STATS    → everyone with a role
"""

from __future__ import annotations

import datetime
import logging
from collections import Counter
from typing import Any, Iterable, NamedTuple

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from django.db.models import Max, Prefetch, Q, QuerySet
from django.utils import timezone

from core.constants import (
    OVERDUE_AFTER_HOURS,
    RECENT_WINDOW_DAYS,
    TREND_DEFAULT_DAYS,
    TREND_MAX_DAYS,
)
from core.domain.access import (
    apply_permission_scope,
    require_authenticated,
    require_permission,
)
from core.domain.exceptions import (
    DomainError,
    EnrichmentFailed,
    InvalidTransition,
    NotFound,
    PermissionDenied,
)
from core.domain.transactions import lock_for_update, save_changed_fields
from core.permissions_constants import ReportsPerms

from .integrations import (
    get_location_provider,
    get_media_store,
    get_priority_classifier,
)
from .models import (
    ISSUE_CATEGORIES,
    STATUS_ORDER,
    Department,
    DepartmentKey,
    HistoryKind,
    IssueType,
    Priority,
    Report,
    ReportHistoryEntry,
    ReportStatus,
    category_for,
)

User = get_user_model()
logger = logging.getLogger(__name__)

#: Ordered scope rules: first matching permission wins.
REPORT_SCOPE_RULES = [
    (ReportsPerms.full(ReportsPerms.CAN_SCOPE_ALL_REPORTS), lambda qs, u: qs),
    (
        ReportsPerms.full(ReportsPerms.CAN_SCOPE_ASSIGNED_REPORTS),
        lambda qs, u: qs.filter(assigned_to=u),
    ),
    (
        ReportsPerms.full(ReportsPerms.CAN_SCOPE_WORKER_REPORTS),
        lambda qs, u: qs.filter(assigned_to_worker=u),
    ),
    (
        ReportsPerms.full(ReportsPerms.CAN_SCOPE_OWN_REPORTS),
        lambda qs, u: qs.filter(reporter=u),
    ),
]

#: Departments that are never bound to a supervisor by auto-assignment.
UNSUPERVISED_DEPARTMENTS = frozenset({DepartmentKey.OTHERS, DepartmentKey.NONE})


def _append_history(
    report: Report,
    *,
    kind: str,
    actor: Any,
    note: str = "",
    **payload: Any,
) -> ReportHistoryEntry:
    """
    Append one audit entry to ``report``.  Must run while the report row
    is locked so the next ``sequence`` is computed race-free.
    """
    last = report.history.aggregate(last=Max("sequence"))["last"] or 0
    return ReportHistoryEntry.objects.create(
        report=report,
        sequence=last + 1,
        kind=kind,
        changed_by=actor,
        changed_at=timezone.now(),
        note=note or "",
        **payload,
    )


# ═══════════════════════════════════════════════════════════════════
#  Report Query Service
# ═══════════════════════════════════════════════════════════════════


class ReportQueryService:
    """
    Constructs role-scoped querysets for listing and reading reports.

    Scope
    -----
    - **Admin**:      every report.
    - **Supervisor**: reports where ``assigned_to == actor``.
    - **Worker**:     reports where ``assigned_to_worker == actor``.
    - **Citizen**:    reports where ``reporter == actor``.
    - Anyone else:    nothing.
    """

    @staticmethod
    def scoped_queryset(actor: Any) -> QuerySet[Report]:
        require_authenticated(actor)
        qs = Report.objects.select_related(
            "reporter", "assigned_to", "assigned_to_worker",
        )
        return apply_permission_scope(
            qs, actor, scope_rules=REPORT_SCOPE_RULES,
        ).order_by("-created_at")

    @staticmethod
    def get_filtered_queryset(
        actor: Any,
        filters: dict[str, Any],
    ) -> QuerySet[Report]:
        """
        Build a role-scoped, filtered queryset of ``Report`` objects.

        Parameters
        ----------
        actor : User
            The requesting user; determines the visible slice.
        filters : dict
            Cleaned query-parameter dict from ``ReportFilterSerializer``.
            Supported keys: ``status``, ``issue_type``, ``assigned_dept``,
            ``priority``, ``assigned_to``, ``assigned_to_worker``,
            ``created_after``, ``created_before``, ``search``.

        Returns
        -------
        QuerySet[Report]
            Ordered by ``created_at`` descending.
        """
        qs = ReportQueryService.scoped_queryset(actor)

        for field in ("status", "issue_type", "assigned_dept", "priority"):
            value = filters.get(field)
            if value:
                qs = qs.filter(**{field: value})

        if filters.get("assigned_to"):
            qs = qs.filter(assigned_to_id=filters["assigned_to"])
        if filters.get("assigned_to_worker"):
            qs = qs.filter(assigned_to_worker_id=filters["assigned_to_worker"])
        if filters.get("created_after"):
            qs = qs.filter(created_at__date__gte=filters["created_after"])
        if filters.get("created_before"):
            qs = qs.filter(created_at__date__lte=filters["created_before"])

        search = filters.get("search")
        if search:
            qs = qs.filter(
                Q(description__icontains=search)
                | Q(issue_label__icontains=search)
                | Q(custom_issue__icontains=search)
                | Q(classification__icontains=search)
            )
        return qs

    @staticmethod
    def get_report_detail(actor: Any, report_id: Any) -> Report:
        """Return a visible report or raise ``NotFound``."""
        qs = ReportQueryService.scoped_queryset(actor).prefetch_related(
            Prefetch(
                "history",
                queryset=ReportHistoryEntry.objects.select_related(
                    "changed_by", "assigned_to", "assigned_to_worker",
                ).order_by("sequence"),
            ),
        )
        try:
            return qs.get(pk=report_id)
        except (Report.DoesNotExist, DjangoValidationError, ValueError, TypeError):
            raise NotFound(f"Report {report_id} not found.")

    @staticmethod
    def get_history(actor: Any, report_id: Any) -> list[ReportHistoryEntry]:
        """Return the report's audit log in append order."""
        report = ReportQueryService.get_report_detail(actor, report_id)
        return list(report.history.all())

    @staticmethod
    def _ensure_visible(actor: Any, report: Report) -> None:
        if not ReportQueryService.scoped_queryset(actor).filter(pk=report.pk).exists():
            raise NotFound(f"Report {report.pk} not found.")


# ═══════════════════════════════════════════════════════════════════
#  Assignment Resolver Service
# ═══════════════════════════════════════════════════════════════════


class DepartmentResolution(NamedTuple):
    dept: str
    supervisor_id: int | None


class AssignmentResolverService:
    """
    Routes a category to its department / supervisor and handles the
    two manual assignment operations.
    """

    @staticmethod
    def resolve_department(issue_type: str) -> DepartmentResolution:
        """
        Map ``issue_type`` to ``(department, supervisor_id)``.

        Unknown keys resolve to ``others`` with no supervisor.  For every
        department except the catch-alls, the department's current
        supervisor is looked up (``None`` when unset or missing).
        """
        dept = category_for(issue_type).department
        if dept in UNSUPERVISED_DEPARTMENTS:
            return DepartmentResolution(dept, None)

        supervisor_id = (
            Department.objects
            .filter(key=dept)
            .values_list("supervisor_id", flat=True)
            .first()
        )
        return DepartmentResolution(dept, supervisor_id)

    @staticmethod
    def _get_assignee(user_id: Any, capability: str, label: str) -> User:
        try:
            user = User.objects.select_related("role").get(pk=user_id)
        except (User.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"{label} with id {user_id} not found.")
        if not user.is_active or not user.has_perm(ReportsPerms.full(capability)):
            raise NotFound(f"User {user_id} is not an assignable {label.lower()}.")
        return user

    @staticmethod
    def _assignment_note(assignee: Any, dept: str) -> str:
        if assignee is None:
            return f"Unassigned ({dept})"
        name = assignee.get_full_name() or assignee.username
        return f"Assigned to {name} ({dept})"

    @staticmethod
    def reassign(
        report_id: Any,
        new_dept: str,
        new_supervisor_id: Any,
        actor: Any,
        note: str = "",
    ) -> Report:
        """
        Manually override a report's department and supervisor (Admin).

        Parameters
        ----------
        report_id : UUID
            Target report.
        new_dept : str
            ``DepartmentKey`` value.
        new_supervisor_id : int | None
            PK of a user holding ``can_be_assigned_supervisor``;
            ``None`` clears the supervisor.
        actor : User
            Must hold ``reports.can_reassign_report``.
        note : str
            Stored on the history entry; a generated
            "Assigned to X (dept)" is used when empty.

        Raises
        ------
        Unauthorized
            No authenticated actor.
        PermissionDenied
            Actor lacks the reassign permission.
        NotFound
            Unknown report, department key or supervisor.
        """
        require_authenticated(actor)
        require_permission(
            actor,
            ReportsPerms.full(ReportsPerms.CAN_REASSIGN_REPORT),
            message="Only administrators can reassign reports.",
        )

        if new_dept not in DepartmentKey.values:
            raise NotFound(f"Department '{new_dept}' does not exist.")

        supervisor = None
        if new_supervisor_id is not None:
            supervisor = AssignmentResolverService._get_assignee(
                new_supervisor_id, ReportsPerms.CAN_BE_ASSIGNED_SUPERVISOR, "Supervisor",
            )

        with transaction.atomic():
            report = lock_for_update(Report, report_id)
            report.assigned_dept = new_dept
            report.assigned_to = supervisor
            save_changed_fields(report, ["assigned_dept", "assigned_to"])
            _append_history(
                report,
                kind=HistoryKind.ASSIGNMENT,
                actor=actor,
                note=note or AssignmentResolverService._assignment_note(supervisor, new_dept),
                assigned_dept=new_dept,
                assigned_to=supervisor,
                assigned_to_worker=report.assigned_to_worker,
            )

        logger.info(
            "Report %s reassigned to %s / supervisor %s by user %s",
            report.pk, new_dept, getattr(supervisor, "pk", None), actor.pk,
        )
        return report

    @staticmethod
    def assign_worker(
        report_id: Any,
        worker_id: Any,
        actor: Any,
        note: str = "",
    ) -> Report:
        """
        Dispatch a worker onto a report the acting supervisor owns.

        Raises
        ------
        Unauthorized
            No authenticated actor.
        PermissionDenied
            Actor lacks ``reports.can_assign_worker`` or the report is not
            currently assigned to them.
        NotFound
            Unknown report, or the worker does not exist / is not a worker.
        """
        require_authenticated(actor)
        require_permission(
            actor,
            ReportsPerms.full(ReportsPerms.CAN_ASSIGN_WORKER),
            message="Only supervisors can assign workers.",
        )

        worker = AssignmentResolverService._get_assignee(
            worker_id, ReportsPerms.CAN_BE_ASSIGNED_WORKER, "Worker",
        )

        with transaction.atomic():
            report = lock_for_update(Report, report_id)
            if report.assigned_to_id != actor.pk:
                raise PermissionDenied(
                    "You can only assign workers to reports assigned to you."
                )
            report.assigned_to_worker = worker
            save_changed_fields(report, ["assigned_to_worker"])
            _append_history(
                report,
                kind=HistoryKind.ASSIGNMENT,
                actor=actor,
                note=note or AssignmentResolverService._assignment_note(worker, report.assigned_dept),
                assigned_dept=report.assigned_dept,
                assigned_to=report.assigned_to,
                assigned_to_worker=worker,
            )

        logger.info(
            "Report %s dispatched to worker %s by supervisor %s",
            report.pk, worker.pk, actor.pk,
        )
        return report


# ═══════════════════════════════════════════════════════════════════
#  Submission Service
# ═══════════════════════════════════════════════════════════════════


class ReportSubmissionService:
    """
    Builds and persists a new report.

    Only authentication and category validation are fatal.  Location
    capture, media upload, department lookup and priority classification
    each degrade to a default when they fail.  External calls happen
    before the database transaction; the create itself is one atomic
    insert, so no partial report is ever stored.
    """

    @staticmethod
    def submit(
        actor: Any,
        validated_data: dict[str, Any],
        *,
        media_store: Any = None,
        classifier: Any = None,
        locator: Any = None,
    ) -> Report:
        """
        Submit a new report on behalf of ``actor``.

        Parameters
        ----------
        actor : User
            The authenticated reporter.
        validated_data : dict
            From ``ReportSubmitSerializer``:
            ``issue_type`` (required), ``description``, ``custom_issue``,
            ``image`` / ``image_mime_type``, ``audio`` / ``audio_mime_type``
            (raw bytes + mime type), ``latitude`` / ``longitude``.
        media_store, classifier, locator :
            Optional collaborator overrides; the configured
            implementations are used when omitted.

        Returns
        -------
        Report
            Persisted with ``status = submitted`` and an empty history.

        Raises
        ------
        Unauthorized
            No authenticated actor.
        DomainError
            Unknown or placeholder category, or an ``others`` report with
            neither a custom issue nor a description.
        """
        require_authenticated(actor)

        issue_type = validated_data.get("issue_type")
        if issue_type not in ISSUE_CATEGORIES:
            raise DomainError(f"'{issue_type}' is not a valid issue type.")
        category = ISSUE_CATEGORIES[issue_type]

        description = (validated_data.get("description") or "").strip()
        custom_issue = (validated_data.get("custom_issue") or "").strip()

        if issue_type == IssueType.OTHERS:
            if not custom_issue and not description:
                raise DomainError(
                    "Describe the issue when choosing 'Other'."
                )
            issue_label = custom_issue or category.label
            custom_issue = custom_issue or description
        else:
            issue_label = category.label
            custom_issue = ""

        # ── 1. Location ──────────────────────────────────────────────
        latitude = validated_data.get("latitude")
        longitude = validated_data.get("longitude")
        if latitude is None or longitude is None:
            latitude, longitude = ReportSubmissionService._capture_location(
                actor, locator or get_location_provider(),
            )

        # ── 2/3. Media ───────────────────────────────────────────────
        image_url = audio_url = None
        if validated_data.get("image") or validated_data.get("audio"):
            store = media_store or get_media_store()
            image_url = ReportSubmissionService._upload(
                store, validated_data.get("image"),
                validated_data.get("image_mime_type") or "image/jpeg", "image",
            )
            audio_url = ReportSubmissionService._upload(
                store, validated_data.get("audio"),
                validated_data.get("audio_mime_type") or "audio/m4a", "audio",
            )

        # ── 4. Department / supervisor ───────────────────────────────
        try:
            resolution = AssignmentResolverService.resolve_department(issue_type)
        except DatabaseError:
            logger.warning(
                "Department lookup failed for issue type %s; routing without supervisor",
                issue_type, exc_info=True,
            )
            resolution = DepartmentResolution(category.department, None)

        # ── 5. Priority ──────────────────────────────────────────────
        priority = ReportSubmissionService._classify(
            classifier or get_priority_classifier(),
            description or custom_issue or issue_label,
        )

        with transaction.atomic():
            report = Report.objects.create(
                reporter=actor,
                description=description,
                issue_type=issue_type,
                issue_label=issue_label,
                custom_issue=custom_issue,
                image_url=image_url,
                audio_url=audio_url,
                latitude=latitude,
                longitude=longitude,
                status=ReportStatus.SUBMITTED,
                assigned_dept=resolution.dept,
                assigned_to_id=resolution.supervisor_id,
                priority=priority,
            )

        logger.info(
            "Report %s submitted by user %s (type=%s, dept=%s, priority=%s)",
            report.pk, actor.pk, issue_type, report.assigned_dept, priority,
        )
        return report

    @staticmethod
    def _capture_location(actor: Any, locator: Any) -> tuple[float | None, float | None]:
        try:
            latitude, longitude = locator.locate(actor)
        except EnrichmentFailed as exc:
            logger.warning("Location capture failed for user %s: %s", actor.pk, exc)
            return None, None
        return latitude, longitude

    @staticmethod
    def _upload(store: Any, data: bytes | None, mime_type: str, label: str) -> str | None:
        if not data:
            return None
        try:
            return store.upload(data, mime_type)
        except EnrichmentFailed as exc:
            logger.warning("%s upload failed, storing report without it: %s", label.capitalize(), exc)
            return None

    @staticmethod
    def _classify(classifier: Any, text: str) -> str:
        try:
            label = classifier.classify(text)
        except EnrichmentFailed as exc:
            logger.warning("Priority classification failed: %s", exc)
            return Priority.NOT_SPECIFIED
        if label not in Priority.values:
            logger.warning("Classifier returned unknown priority %r", label)
            return Priority.NOT_SPECIFIED
        return label


# ═══════════════════════════════════════════════════════════════════
#  Workflow Service
# ═══════════════════════════════════════════════════════════════════


class ReportWorkflowService:
    """
    Status transitions, free-text notes and staff classification.

    Each operation locks the report row, changes its fields, bumps
    ``updated_at`` and appends one history entry in one transaction.
    The report must be visible to the actor (role scope), otherwise
    ``NotFound`` is raised.
    """

    @staticmethod
    def update_status(
        report_id: Any,
        new_status: str,
        actor: Any,
        note: str = "",
    ) -> Report:
        """
        Move a report along ``submitted → acknowledged → in_progress →
        resolved``.

        Forward jumps and re-affirming the current status (to attach a
        note) are allowed.

        Raises
        ------
        Unauthorized
            No authenticated actor.
        PermissionDenied
            Actor lacks ``reports.can_change_report_status``.
        DomainError
            ``new_status`` is not a lifecycle state.
        NotFound
            Report missing or outside the actor's scope.
        InvalidTransition
            ``new_status`` comes before the current status.
        """
        require_authenticated(actor)
        require_permission(
            actor,
            ReportsPerms.full(ReportsPerms.CAN_CHANGE_REPORT_STATUS),
            message="Only supervisors and administrators can change report status.",
        )
        if new_status not in STATUS_ORDER:
            raise DomainError(f"'{new_status}' is not a valid report status.")

        with transaction.atomic():
            report = lock_for_update(Report, report_id)
            ReportQueryService._ensure_visible(actor, report)

            current = report.status
            if STATUS_ORDER.index(new_status) < STATUS_ORDER.index(current):
                raise InvalidTransition(
                    current=current,
                    target=new_status,
                    reason="Reports cannot move back to an earlier status",
                )

            report.status = new_status
            save_changed_fields(report, ["status"])
            _append_history(
                report,
                kind=HistoryKind.STATUS,
                actor=actor,
                note=note,
                status=new_status,
            )

        logger.info(
            "Report %s status %s -> %s by user %s",
            report.pk, current, new_status, actor.pk,
        )
        return report

    @staticmethod
    def add_note(report_id: Any, note: str, actor: Any) -> Report:
        """Append a ``note`` entry; the status is left untouched."""
        require_authenticated(actor)
        require_permission(
            actor,
            ReportsPerms.full(ReportsPerms.CAN_ADD_REPORT_NOTE),
            message="You are not allowed to add notes to reports.",
        )
        note = (note or "").strip()
        if not note:
            raise DomainError("Note text must not be empty.")

        with transaction.atomic():
            report = lock_for_update(Report, report_id)
            ReportQueryService._ensure_visible(actor, report)
            save_changed_fields(report, [])
            _append_history(report, kind=HistoryKind.NOTE, actor=actor, note=note)

        logger.info("Note added to report %s by user %s", report.pk, actor.pk)
        return report

    @staticmethod
    def classify(
        report_id: Any,
        classification: str,
        actor: Any,
        note: str = "",
    ) -> Report:
        """Set the staff classification and record it in the history."""
        require_authenticated(actor)
        require_permission(
            actor,
            ReportsPerms.full(ReportsPerms.CAN_CLASSIFY_REPORT),
            message="Only supervisors and administrators can classify reports.",
        )
        classification = (classification or "").strip()
        if not classification:
            raise DomainError("Classification must not be empty.")

        with transaction.atomic():
            report = lock_for_update(Report, report_id)
            ReportQueryService._ensure_visible(actor, report)
            report.classification = classification
            report.classification_note = note or ""
            save_changed_fields(report, ["classification", "classification_note"])
            _append_history(
                report,
                kind=HistoryKind.CLASSIFICATION,
                actor=actor,
                note=note,
                classification=classification,
            )

        logger.info(
            "Report %s classified as %r by user %s",
            report.pk, classification, actor.pk,
        )
        return report


# ═══════════════════════════════════════════════════════════════════
#  Stats Service
# ═══════════════════════════════════════════════════════════════════


class ReportStatsService:
    """
    Dashboard aggregates.

    Every aggregate is a pure function of a list of reports and a
    reference time, so the same numbers come out of the REST endpoint
    and the realtime feed.
    """

    @staticmethod
    def overdue_hours() -> int:
        return int(getattr(settings, "REPORTS_OVERDUE_HOURS", OVERDUE_AFTER_HOURS))

    @staticmethod
    def is_overdue(report: Report, now: datetime.datetime, hours: int | None = None) -> bool:
        """Open and created strictly more than ``hours`` before ``now``."""
        if hours is None:
            hours = ReportStatsService.overdue_hours()
        return report.is_open and report.created_at < now - datetime.timedelta(hours=hours)

    @staticmethod
    def resolution_hours(report: Report) -> float | None:
        """
        Hours between submission and the first ``resolved`` status entry,
        or ``None`` when the report was never resolved.
        """
        for entry in report.history.all():
            if entry.kind == HistoryKind.STATUS and entry.status == ReportStatus.RESOLVED:
                return (entry.changed_at - report.created_at).total_seconds() / 3600
        return None

    @staticmethod
    def daily_trend(
        reports: Iterable[Report],
        days: int = TREND_DEFAULT_DAYS,
        now: datetime.datetime | None = None,
    ) -> list[dict[str, Any]]:
        """Submission counts per local day, oldest first, ending today."""
        now = now or timezone.now()
        today = timezone.localtime(now).date()
        counts = Counter(timezone.localtime(r.created_at).date() for r in reports)
        return [
            {"date": day, "count": counts.get(day, 0)}
            for day in (today - datetime.timedelta(days=offset) for offset in range(days - 1, -1, -1))
        ]

    @staticmethod
    def compute(
        reports: Iterable[Report],
        now: datetime.datetime | None = None,
    ) -> dict[str, Any]:
        """
        Aggregate ``reports`` as of ``now``.

        Returns ``total``, ``open``, ``overdue``, ``submitted_today``,
        ``last_7_days``, ``by_status`` and ``avg_resolution_hours``.
        """
        reports = list(reports)
        now = now or timezone.now()
        today = timezone.localtime(now).date()
        window_start = now - datetime.timedelta(days=RECENT_WINDOW_DAYS)
        hours = ReportStatsService.overdue_hours()

        by_status = {value: 0 for value in STATUS_ORDER}
        for report in reports:
            by_status[report.status] = by_status.get(report.status, 0) + 1

        durations = [
            d for d in (ReportStatsService.resolution_hours(r) for r in reports)
            if d is not None
        ]

        return {
            "total": len(reports),
            "open": sum(1 for r in reports if r.is_open),
            "overdue": sum(1 for r in reports if ReportStatsService.is_overdue(r, now, hours)),
            "submitted_today": sum(
                1 for r in reports if timezone.localtime(r.created_at).date() == today
            ),
            "last_7_days": sum(1 for r in reports if r.created_at >= window_start),
            "by_status": by_status,
            "avg_resolution_hours": (
                round(sum(durations) / len(durations), 2) if durations else None
            ),
        }

    @staticmethod
    def get_dashboard(actor: Any, days: int = TREND_DEFAULT_DAYS) -> dict[str, Any]:
        """Aggregates plus the daily trend over the actor's visible reports."""
        require_authenticated(actor)
        require_permission(
            actor,
            ReportsPerms.full(ReportsPerms.CAN_VIEW_REPORT_STATS),
            message="You are not allowed to view report statistics.",
        )
        days = max(1, min(int(days), TREND_MAX_DAYS))

        reports = list(
            ReportQueryService.scoped_queryset(actor).prefetch_related(
                Prefetch("history", queryset=ReportHistoryEntry.objects.order_by("sequence")),
            )
        )
        now = timezone.now()
        stats = ReportStatsService.compute(reports, now)
        stats["daily_trend"] = ReportStatsService.daily_trend(reports, days, now)
        return stats


# ═══════════════════════════════════════════════════════════════════
#  Department Service
# ═══════════════════════════════════════════════════════════════════


class DepartmentService:
    @staticmethod
    def list_departments(actor: Any) -> QuerySet[Department]:
        require_authenticated(actor)
        return Department.objects.select_related("supervisor").order_by("key")
