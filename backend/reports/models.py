"""
Reports app models.

Covers the civic-issue report lifecycle: a citizen submits a report,
it is routed to a department and supervisor, a supervisor dispatches a
worker, and staff move it forward until it is resolved.  Every staff
mutation appends one ``ReportHistoryEntry``; the history is never
rewritten.
"""

from __future__ import annotations

import uuid
from typing import NamedTuple

from django.conf import settings
from django.db import models

from core.domain.exceptions import Conflict
from core.models import TimeStampedModel
from core.permissions_constants import ReportsPerms


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class ReportStatus(models.TextChoices):
    """
    Lifecycle states.  Declaration order is the canonical forward path;
    a report may never move to a state declared before its current one.
    """

    SUBMITTED = "submitted", "Submitted"
    ACKNOWLEDGED = "acknowledged", "Acknowledged"
    IN_PROGRESS = "in_progress", "In Progress"
    RESOLVED = "resolved", "Resolved"


#: Forward order of ``ReportStatus`` values.
STATUS_ORDER: list[str] = list(ReportStatus.values)


class Priority(models.TextChoices):
    LOW = "Low", "Low"
    MEDIUM = "Medium", "Medium"
    HIGH = "High", "High"
    NOT_SPECIFIED = "Not Specified", "Not Specified"


class DepartmentKey(models.TextChoices):
    ROADS = "roads", "Roads"
    ELECTRICAL = "electrical", "Electrical"
    SANITATION = "sanitation", "Sanitation"
    WATER = "water", "Water"
    PARKS = "parks", "Parks"
    OTHERS = "others", "Others"
    NONE = "none", "Unassigned"


class IssueType(models.TextChoices):
    """Categories a citizen can pick when submitting a report."""

    ROAD = "road", "Pothole / Road Damage"
    STREETLIGHT = "streetlight", "Streetlight / Electricity"
    SANITATION = "sanitation", "Garbage / Sanitation"
    WATER = "water", "Water / Drainage"
    TREE = "tree", "Tree / Vegetation"
    OTHERS = "others", "Other"


class HistoryKind(models.TextChoices):
    STATUS = "status", "Status Change"
    ASSIGNMENT = "assignment", "Assignment"
    CLASSIFICATION = "classification", "Classification"
    NOTE = "note", "Note"


# ────────────────────────────────────────────────────────────────────
# Category routing table
# ────────────────────────────────────────────────────────────────────

class IssueCategory(NamedTuple):
    key: str
    label: str
    department: str


#: Placeholder key shown by clients before a category is picked.
#: It routes nowhere and is never accepted on submission.
PLACEHOLDER_ISSUE_TYPE = "default"

ISSUE_CATEGORIES: dict[str, IssueCategory] = {
    IssueType.ROAD: IssueCategory(IssueType.ROAD, IssueType.ROAD.label, DepartmentKey.ROADS),
    IssueType.STREETLIGHT: IssueCategory(
        IssueType.STREETLIGHT, IssueType.STREETLIGHT.label, DepartmentKey.ELECTRICAL,
    ),
    IssueType.SANITATION: IssueCategory(
        IssueType.SANITATION, IssueType.SANITATION.label, DepartmentKey.SANITATION,
    ),
    IssueType.WATER: IssueCategory(IssueType.WATER, IssueType.WATER.label, DepartmentKey.WATER),
    IssueType.TREE: IssueCategory(IssueType.TREE, IssueType.TREE.label, DepartmentKey.PARKS),
    IssueType.OTHERS: IssueCategory(IssueType.OTHERS, IssueType.OTHERS.label, DepartmentKey.OTHERS),
}

PLACEHOLDER_CATEGORY = IssueCategory(
    PLACEHOLDER_ISSUE_TYPE, "Select an issue type", DepartmentKey.NONE,
)


def category_for(issue_type: str) -> IssueCategory:
    """
    Return the routing entry for ``issue_type``.

    Unknown keys fall into the catch-all ``others`` category.
    """
    if issue_type == PLACEHOLDER_ISSUE_TYPE:
        return PLACEHOLDER_CATEGORY
    return ISSUE_CATEGORIES.get(issue_type, ISSUE_CATEGORIES[IssueType.OTHERS])


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Department(models.Model):
    """
    Static directory entry binding a department key to its current
    supervisor.  Reports look departments up; they never own them.
    """

    key = models.CharField(
        max_length=20,
        choices=DepartmentKey.choices,
        unique=True,
        verbose_name="Department Key",
    )
    name = models.CharField(
        max_length=100,
        verbose_name="Display Name",
    )
    supervisor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="supervised_departments",
        verbose_name="Supervisor",
    )

    class Meta:
        verbose_name = "Department"
        verbose_name_plural = "Departments"
        ordering = ["key"]

    def __str__(self):
        return self.name or self.key


class Report(TimeStampedModel):
    """
    A citizen-submitted civic issue.

    Media URLs, coordinates and ``priority`` are fixed at submission.
    ``status``, the three assignment fields and ``classification`` are
    changed only through ``reports.services``, which appends the matching
    history entry in the same transaction.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )
    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reports",
        verbose_name="Reporter",
    )

    # ── What ────────────────────────────────────────────────────────
    description = models.TextField(
        blank=True,
        default="",
        verbose_name="Description",
    )
    issue_type = models.CharField(
        max_length=20,
        choices=IssueType.choices,
        db_index=True,
        verbose_name="Issue Type",
    )
    issue_label = models.CharField(
        max_length=100,
        verbose_name="Issue Label",
    )
    custom_issue = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name="Custom Issue",
        help_text="Only populated for the 'others' category.",
    )

    # ── Media & location (immutable after submission) ───────────────
    image_url = models.URLField(
        max_length=500,
        null=True,
        blank=True,
        verbose_name="Image URL",
    )
    audio_url = models.URLField(
        max_length=500,
        null=True,
        blank=True,
        verbose_name="Audio URL",
    )
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    # ── Lifecycle ───────────────────────────────────────────────────
    status = models.CharField(
        max_length=20,
        choices=ReportStatus.choices,
        default=ReportStatus.SUBMITTED,
        db_index=True,
        verbose_name="Status",
    )
    priority = models.CharField(
        max_length=20,
        choices=Priority.choices,
        default=Priority.NOT_SPECIFIED,
        verbose_name="Priority",
    )
    classification = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name="Classification",
    )
    classification_note = models.TextField(
        blank=True,
        default="",
        verbose_name="Classification Note",
    )

    # ── Assignment ──────────────────────────────────────────────────
    assigned_dept = models.CharField(
        max_length=20,
        choices=DepartmentKey.choices,
        default=DepartmentKey.NONE,
        db_index=True,
        verbose_name="Assigned Department",
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="supervised_reports",
        verbose_name="Assigned Supervisor",
    )
    assigned_to_worker = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="worker_reports",
        verbose_name="Assigned Worker",
    )

    class Meta:
        verbose_name = "Report"
        verbose_name_plural = "Reports"
        ordering = ["-created_at"]
        permissions = [
            (ReportsPerms.CAN_CHANGE_REPORT_STATUS, "Can change report status"),
            (ReportsPerms.CAN_ADD_REPORT_NOTE, "Can add a note to a report"),
            (ReportsPerms.CAN_CLASSIFY_REPORT, "Can classify a report"),
            (ReportsPerms.CAN_REASSIGN_REPORT, "Can reassign a report's department and supervisor"),
            (ReportsPerms.CAN_ASSIGN_WORKER, "Can assign a worker to a report"),
            (ReportsPerms.CAN_VIEW_REPORT_STATS, "Can view report statistics"),
            (ReportsPerms.CAN_SCOPE_ALL_REPORTS, "Can see all reports"),
            (ReportsPerms.CAN_SCOPE_ASSIGNED_REPORTS, "Can see reports assigned as supervisor"),
            (ReportsPerms.CAN_SCOPE_WORKER_REPORTS, "Can see reports assigned as worker"),
            (ReportsPerms.CAN_SCOPE_OWN_REPORTS, "Can see own submitted reports"),
            (ReportsPerms.CAN_BE_ASSIGNED_SUPERVISOR, "Can be assigned reports as supervisor"),
            (ReportsPerms.CAN_BE_ASSIGNED_WORKER, "Can be assigned reports as worker"),
        ]

    def __str__(self):
        return f"Report {self.id} [{self.status}] {self.issue_label}"

    @property
    def is_open(self) -> bool:
        return self.status != ReportStatus.RESOLVED

    @property
    def location(self) -> tuple[float, float] | None:
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)


class ReportHistoryQuerySet(models.QuerySet):
    """Refuses bulk rewrites of the audit trail."""

    def update(self, **kwargs):
        raise Conflict("Report history entries are append-only.")

    def delete(self):
        raise Conflict("Report history entries are append-only.")


class ReportHistoryEntry(models.Model):
    """
    One immutable audit record of a report mutation.

    ``sequence`` is the 1-based position in the report's history and is
    the only ordering key; ``changed_at`` is stamped by the writer, not
    by the database.
    """

    report = models.ForeignKey(
        Report,
        on_delete=models.CASCADE,
        related_name="history",
        verbose_name="Report",
    )
    sequence = models.PositiveIntegerField(
        verbose_name="Sequence",
    )
    kind = models.CharField(
        max_length=20,
        choices=HistoryKind.choices,
        verbose_name="Kind",
    )

    # ── Kind-specific payload ───────────────────────────────────────
    status = models.CharField(
        max_length=20,
        choices=ReportStatus.choices,
        blank=True,
        default="",
    )
    classification = models.CharField(
        max_length=100,
        blank=True,
        default="",
    )
    assigned_dept = models.CharField(
        max_length=20,
        choices=DepartmentKey.choices,
        blank=True,
        default="",
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    assigned_to_worker = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    # ── Audit ───────────────────────────────────────────────────────
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="report_history_entries",
        verbose_name="Changed By",
    )
    changed_at = models.DateTimeField(
        verbose_name="Changed At",
    )
    note = models.TextField(
        blank=True,
        default="",
        verbose_name="Note",
    )

    objects = ReportHistoryQuerySet.as_manager()

    class Meta:
        verbose_name = "Report History Entry"
        verbose_name_plural = "Report History Entries"
        ordering = ["report", "sequence"]
        constraints = [
            models.UniqueConstraint(
                fields=["report", "sequence"],
                name="unique_report_history_sequence",
            ),
        ]

    def __str__(self):
        return f"Report {self.report_id} #{self.sequence} ({self.kind})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise Conflict("Report history entries are append-only.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise Conflict("Report history entries are append-only.")
