"""
Service tests — role-scoped report visibility.

Each role sees exactly its slice, newest first:
Admin → all, Supervisor → ``assigned_to``, Worker → ``assigned_to_worker``,
Citizen → ``reporter``; a user without a role sees nothing.
"""

from __future__ import annotations

import datetime

import pytest
from django.utils import timezone

from core.domain.exceptions import NotFound, Unauthorized
from reports.services import ReportQueryService

pytestmark = pytest.mark.django_db


@pytest.fixture()
def world(create_user, make_report):
    now = timezone.now()
    users = {
        "admin": create_user(username="admin", role_name="Admin"),
        "sup_a": create_user(username="sup_a", role_name="Supervisor"),
        "sup_b": create_user(username="sup_b", role_name="Supervisor"),
        "worker": create_user(username="worker", role_name="Worker"),
        "cit_a": create_user(username="cit_a", role_name="Citizen"),
        "cit_b": create_user(username="cit_b", role_name="Citizen"),
        "nobody": create_user(username="nobody"),
    }
    reports = {
        "r1": make_report(reporter=users["cit_a"], assigned_to=users["sup_a"],
                          created_at=now - datetime.timedelta(hours=5)),
        "r2": make_report(reporter=users["cit_b"], assigned_to=users["sup_a"],
                          assigned_to_worker=users["worker"],
                          created_at=now - datetime.timedelta(hours=1)),
        "r3": make_report(reporter=users["cit_a"], assigned_to=users["sup_b"],
                          created_at=now - datetime.timedelta(hours=3)),
        "r4": make_report(reporter=users["cit_b"], issue_type="others",
                          custom_issue="Noise", created_at=now - datetime.timedelta(hours=2)),
    }
    return users, reports


def _ids(qs):
    return [r.pk for r in qs]


class TestScopedQueryset:

    @pytest.mark.parametrize(
        "who, expected",
        [
            ("admin", ["r2", "r4", "r3", "r1"]),
            ("sup_a", ["r2", "r1"]),
            ("sup_b", ["r3"]),
            ("worker", ["r2"]),
            ("cit_a", ["r3", "r1"]),
            ("cit_b", ["r2", "r4"]),
            ("nobody", []),
        ],
    )
    def test_each_role_sees_its_slice_newest_first(self, world, who, expected):
        users, reports = world

        result = ReportQueryService.scoped_queryset(users[who])

        assert _ids(result) == [reports[name].pk for name in expected]

    def test_anonymous_is_unauthorized(self, world):
        with pytest.raises(Unauthorized):
            ReportQueryService.scoped_queryset(None)

    def test_filters_narrow_the_scope(self, world):
        users, reports = world

        result = ReportQueryService.get_filtered_queryset(
            users["admin"], {"assigned_dept": "others"},
        )
        assert _ids(result) == [reports["r4"].pk]

        result = ReportQueryService.get_filtered_queryset(users["admin"], {"search": "noise"})
        assert _ids(result) == [reports["r4"].pk]

        result = ReportQueryService.get_filtered_queryset(
            users["sup_a"], {"assigned_to_worker": users["worker"].pk},
        )
        assert _ids(result) == [reports["r2"].pk]

    def test_filters_never_widen_the_scope(self, world):
        users, _ = world

        result = ReportQueryService.get_filtered_queryset(
            users["cit_a"], {"assigned_to": users["sup_b"].pk, "status": "submitted"},
        )

        assert all(r.reporter == users["cit_a"] for r in result)


class TestDetail:

    def test_invisible_report_is_not_found(self, world):
        users, reports = world

        with pytest.raises(NotFound):
            ReportQueryService.get_report_detail(users["cit_a"], reports["r2"].pk)

    def test_visible_report_includes_history(self, world):
        users, reports = world

        report = ReportQueryService.get_report_detail(users["worker"], reports["r2"].pk)

        assert report.pk == reports["r2"].pk
        assert ReportQueryService.get_history(users["worker"], reports["r2"].pk) == []

    def test_malformed_id_is_not_found(self, world):
        users, _ = world

        with pytest.raises(NotFound):
            ReportQueryService.get_report_detail(users["admin"], "123")
