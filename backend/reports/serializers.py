"""
Reports app serializers.

Request serializers validate the boundary (strict category and status
enumerations, coordinate pairs, upload size); response serializers shape
reports, their audit log, departments and dashboard aggregates.  No
business rules live here.
"""

from __future__ import annotations

from typing import Any

from django.conf import settings
from rest_framework import serializers

from .models import (
    Department,
    DepartmentKey,
    IssueType,
    Priority,
    Report,
    ReportHistoryEntry,
    ReportStatus,
)

MAX_UPLOAD_BYTES = getattr(settings, "REPORTS_MAX_UPLOAD_BYTES", 10 * 1024 * 1024)


def _display_name(user) -> str | None:
    if user is None:
        return None
    return user.get_full_name() or user.username


# ═══════════════════════════════════════════════════════════════════
#  1. Filter / Query Serializers
# ═══════════════════════════════════════════════════════════════════


class ReportFilterSerializer(serializers.Serializer):
    """
    Validates and cleans query-parameter filters for ``GET /api/reports/``.

    All fields are optional.  The view passes the validated dict directly
    to ``ReportQueryService.get_filtered_queryset``.
    """

    status = serializers.ChoiceField(choices=ReportStatus.choices, required=False)
    issue_type = serializers.ChoiceField(choices=IssueType.choices, required=False)
    assigned_dept = serializers.ChoiceField(choices=DepartmentKey.choices, required=False)
    priority = serializers.ChoiceField(choices=Priority.choices, required=False)
    assigned_to = serializers.IntegerField(required=False, min_value=1)
    assigned_to_worker = serializers.IntegerField(required=False, min_value=1)
    created_after = serializers.DateField(required=False, help_text="ISO 8601 date (inclusive).")
    created_before = serializers.DateField(required=False, help_text="ISO 8601 date (inclusive).")
    search = serializers.CharField(
        required=False,
        max_length=255,
        help_text="Free-text search against description, label and classification.",
    )

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        after = attrs.get("created_after")
        before = attrs.get("created_before")
        if after and before and after > before:
            raise serializers.ValidationError(
                "created_after must be earlier than created_before."
            )
        return attrs


class StatsQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(required=False, min_value=1, max_value=365, default=30)


# ═══════════════════════════════════════════════════════════════════
#  2. Read Serializers
# ═══════════════════════════════════════════════════════════════════


class ReportHistoryEntrySerializer(serializers.ModelSerializer):
    """Read-only serializer for one audit-log entry."""

    changed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = ReportHistoryEntry
        fields = [
            "sequence",
            "kind",
            "status",
            "classification",
            "assigned_dept",
            "assigned_to",
            "assigned_to_worker",
            "changed_by",
            "changed_by_name",
            "changed_at",
            "note",
        ]
        read_only_fields = fields

    def get_changed_by_name(self, obj: ReportHistoryEntry) -> str | None:
        return _display_name(obj.changed_by)


class ReportListSerializer(serializers.ModelSerializer):
    """Compact representation used by dashboard tables."""

    assigned_to_name = serializers.SerializerMethodField()
    assigned_to_worker_name = serializers.SerializerMethodField()

    class Meta:
        model = Report
        fields = [
            "id",
            "issue_type",
            "issue_label",
            "status",
            "priority",
            "assigned_dept",
            "assigned_to",
            "assigned_to_name",
            "assigned_to_worker",
            "assigned_to_worker_name",
            "classification",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_assigned_to_name(self, obj: Report) -> str | None:
        return _display_name(obj.assigned_to)

    def get_assigned_to_worker_name(self, obj: Report) -> str | None:
        return _display_name(obj.assigned_to_worker)


class ReportDetailSerializer(ReportListSerializer):
    """Full report with its audit log."""

    reporter_name = serializers.SerializerMethodField()
    history = ReportHistoryEntrySerializer(many=True, read_only=True)

    class Meta(ReportListSerializer.Meta):
        fields = ReportListSerializer.Meta.fields + [
            "reporter",
            "reporter_name",
            "description",
            "custom_issue",
            "image_url",
            "audio_url",
            "latitude",
            "longitude",
            "classification_note",
            "history",
        ]
        read_only_fields = fields

    def get_reporter_name(self, obj: Report) -> str | None:
        return _display_name(obj.reporter)


class DepartmentSerializer(serializers.ModelSerializer):
    supervisor_name = serializers.SerializerMethodField()

    class Meta:
        model = Department
        fields = ["key", "name", "supervisor", "supervisor_name"]
        read_only_fields = fields

    def get_supervisor_name(self, obj: Department) -> str | None:
        return _display_name(obj.supervisor)


class DepartmentResolutionSerializer(serializers.Serializer):
    dept = serializers.CharField()
    supervisor_id = serializers.IntegerField(allow_null=True)


class DailyCountSerializer(serializers.Serializer):
    date = serializers.DateField()
    count = serializers.IntegerField()


class ReportStatsSerializer(serializers.Serializer):
    """
    Response for ``GET /api/reports/stats/``.

    ``overdue`` counts open reports created more than
    ``REPORTS_OVERDUE_HOURS`` (default 48) hours ago.
    """

    total = serializers.IntegerField()
    open = serializers.IntegerField()
    overdue = serializers.IntegerField()
    submitted_today = serializers.IntegerField()
    last_7_days = serializers.IntegerField()
    by_status = serializers.DictField(child=serializers.IntegerField())
    avg_resolution_hours = serializers.FloatField(allow_null=True)
    daily_trend = DailyCountSerializer(many=True)


# ═══════════════════════════════════════════════════════════════════
#  3. Write Serializers
# ═══════════════════════════════════════════════════════════════════


class ReportSubmitSerializer(serializers.Serializer):
    """
    Multipart body for ``POST /api/reports/``.

    ``issue_type`` is a strict enumeration; the ``default`` placeholder
    is rejected.  Coordinates must be sent together or not at all.
    Uploaded files are read into bytes for the media store.
    """

    issue_type = serializers.ChoiceField(choices=IssueType.choices)
    description = serializers.CharField(required=False, allow_blank=True, default="", max_length=5000)
    custom_issue = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    latitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    longitude = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)
    image = serializers.FileField(required=False, allow_null=True)
    audio = serializers.FileField(required=False, allow_null=True)

    def _validate_upload(self, upload):
        if upload is not None and upload.size > MAX_UPLOAD_BYTES:
            raise serializers.ValidationError("File is too large.")
        return upload

    def validate_image(self, value):
        return self._validate_upload(value)

    def validate_audio(self, value):
        return self._validate_upload(value)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if (attrs.get("latitude") is None) != (attrs.get("longitude") is None):
            raise serializers.ValidationError(
                "latitude and longitude must be provided together."
            )

        for name, default_mime in (("image", "image/jpeg"), ("audio", "audio/m4a")):
            upload = attrs.pop(name, None)
            if upload is not None:
                attrs[name] = upload.read()
                attrs[f"{name}_mime_type"] = getattr(upload, "content_type", None) or default_mime
        return attrs


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ReportStatus.choices)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class NoteSerializer(serializers.Serializer):
    note = serializers.CharField(max_length=5000)


class ClassifySerializer(serializers.Serializer):
    classification = serializers.CharField(max_length=100)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class ReassignSerializer(serializers.Serializer):
    """Department keys are checked by the service (unknown → 404)."""

    assigned_dept = serializers.CharField(max_length=20)
    assigned_to = serializers.IntegerField(required=False, allow_null=True, default=None)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class AssignWorkerSerializer(serializers.Serializer):
    worker_id = serializers.IntegerField()
    note = serializers.CharField(required=False, allow_blank=True, default="")

