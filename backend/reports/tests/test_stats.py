"""
Tests — ``ReportStatsService`` aggregates.

Aggregates are pure functions of the report list and a reference time,
so most checks pass ``now`` explicitly.
"""

from __future__ import annotations

import datetime

import pytest
from django.utils import timezone

from core.domain.exceptions import PermissionDenied
from reports.models import Report, ReportStatus
from reports.services import ReportStatsService, ReportWorkflowService

NOW = datetime.datetime(2026, 3, 10, 12, 0, tzinfo=datetime.timezone.utc)


def _report(status=ReportStatus.SUBMITTED, **age):
    return Report(status=status, created_at=NOW - datetime.timedelta(**age))


class TestOverdue:

    def test_boundary_around_48_hours(self):
        assert not ReportStatsService.is_overdue(_report(hours=47, minutes=59), NOW)
        assert ReportStatsService.is_overdue(_report(hours=48, minutes=1), NOW)

    def test_exactly_48_hours_is_not_overdue(self):
        assert not ReportStatsService.is_overdue(_report(hours=48), NOW)

    def test_resolved_report_is_never_overdue(self):
        assert not ReportStatsService.is_overdue(_report(ReportStatus.RESOLVED, days=30), NOW)

    def test_threshold_comes_from_settings(self, settings):
        settings.REPORTS_OVERDUE_HOURS = 24

        assert ReportStatsService.is_overdue(_report(hours=25), NOW)


@pytest.mark.django_db
class TestCompute:

    def test_aggregates(self, make_report, settings):
        settings.TIME_ZONE = "UTC"
        make_report(created_at=NOW - datetime.timedelta(hours=1))
        make_report(created_at=NOW - datetime.timedelta(hours=49))
        make_report(created_at=NOW - datetime.timedelta(days=8), status=ReportStatus.RESOLVED)
        make_report(created_at=NOW - datetime.timedelta(days=3), status=ReportStatus.IN_PROGRESS)

        stats = ReportStatsService.compute(Report.objects.all(), now=NOW)

        assert stats["total"] == 4
        assert stats["open"] == 3
        assert stats["overdue"] == 2
        assert stats["submitted_today"] == 1
        assert stats["last_7_days"] == 3
        assert stats["by_status"] == {
            "submitted": 2, "acknowledged": 0, "in_progress": 1, "resolved": 1,
        }
        assert stats["avg_resolution_hours"] is None

    def test_empty_list(self):
        stats = ReportStatsService.compute([], now=NOW)

        assert stats["total"] == 0
        assert stats["by_status"] == {s: 0 for s in ReportStatus.values}

    def test_average_resolution_uses_first_resolved_entry(self, make_report, create_user):
        supervisor = create_user(role_name="Supervisor")
        report = make_report(
            assigned_to=supervisor,
            created_at=timezone.now() - datetime.timedelta(hours=10),
        )
        ReportWorkflowService.update_status(report.pk, "resolved", supervisor)
        ReportWorkflowService.update_status(report.pk, "resolved", supervisor, note="confirmed")

        stats = ReportStatsService.compute(Report.objects.prefetch_related("history"))

        assert stats["avg_resolution_hours"] == pytest.approx(10, abs=0.1)

    def test_daily_trend_is_oldest_first_and_ends_today(self, make_report, settings):
        settings.TIME_ZONE = "UTC"
        make_report(created_at=NOW - datetime.timedelta(hours=2))
        make_report(created_at=NOW - datetime.timedelta(days=2))
        make_report(created_at=NOW - datetime.timedelta(days=2, hours=1))
        make_report(created_at=NOW - datetime.timedelta(days=9))

        trend = ReportStatsService.daily_trend(Report.objects.all(), days=3, now=NOW)

        assert trend == [
            {"date": datetime.date(2026, 3, 8), "count": 2},
            {"date": datetime.date(2026, 3, 9), "count": 0},
            {"date": datetime.date(2026, 3, 10), "count": 1},
        ]


@pytest.mark.django_db
class TestDashboard:

    def test_scoped_to_actor(self, make_report, create_user):
        citizen = create_user(role_name="Citizen")
        make_report(reporter=citizen)
        make_report()

        data = ReportStatsService.get_dashboard(citizen, days=7)

        assert data["total"] == 1
        assert len(data["daily_trend"]) == 7
        assert data["daily_trend"][-1]["count"] == 1

    def test_worker_lacks_stats_permission(self, create_user):
        with pytest.raises(PermissionDenied):
            ReportStatsService.get_dashboard(create_user(role_name="Worker"))

    def test_days_are_clamped(self, create_user):
        data = ReportStatsService.get_dashboard(create_user(role_name="Admin"), days=5000)

        assert len(data["daily_trend"]) == 365
