"""
Smoke tests — verify that Django boots, URL routing resolves, and
the core domain modules behave.

They do NOT require real data; they just prove the plumbing works.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from django.urls import resolve, reverse


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure all top-level app URL names reverse and resolve."""

    EXPECTED_URLS = [
        # (url_name, expected_path)
        ("report-list",             "/api/reports/"),
        ("report-stats",            "/api/reports/stats/"),
        ("department-list",         "/api/departments/"),
        ("department-resolve",      "/api/departments/resolve/"),
        ("accounts:login",          "/api/accounts/auth/login/"),
        ("accounts:worker-list",    "/api/accounts/workers/"),
        ("core:system-constants",   "/api/core/constants/"),
        ("schema",                  "/api/schema/"),
    ]

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_reverses(self, url_name: str, expected_path: str):
        assert reverse(url_name) == expected_path

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_resolves_to_view(self, url_name: str, expected_path: str):
        assert resolve(expected_path).func is not None

    def test_detail_actions_reverse(self):
        pk = "9b2f3c6e-5d1a-4e7b-8c3d-2f1e0a9b8c7d"
        assert reverse("report-assign-worker", kwargs={"pk": pk}) == f"/api/reports/{pk}/assign-worker/"
        assert reverse("report-update-status", kwargs={"pk": pk}) == f"/api/reports/{pk}/status/"


# ════════════════════════════════════════════════════════════════════
#  Exception Behaviour Tests
# ════════════════════════════════════════════════════════════════════

class TestDomainExceptions:

    def test_hierarchy(self):
        from core.domain.exceptions import (
            Conflict,
            DomainError,
            EnrichmentFailed,
            InvalidTransition,
            NotFound,
            PermissionDenied,
            Unauthorized,
        )
        assert issubclass(InvalidTransition, Conflict)
        assert issubclass(Conflict, DomainError)
        for exc in (PermissionDenied, NotFound, Unauthorized, EnrichmentFailed):
            assert issubclass(exc, DomainError)

    def test_invalid_transition_structured(self):
        from core.domain.exceptions import InvalidTransition

        err = InvalidTransition(current="resolved", target="submitted", reason="No going back")

        assert "resolved" in str(err)
        assert "submitted" in str(err)
        assert "No going back" in str(err)
        assert (err.current, err.target) == ("resolved", "submitted")

    def test_invalid_transition_plain_message(self):
        from core.domain.exceptions import InvalidTransition

        assert str(InvalidTransition("Cannot reopen.")) == "Cannot reopen."

    @pytest.mark.parametrize(
        "exc_name, status_code",
        [
            ("DomainError", 400),
            ("Unauthorized", 401),
            ("PermissionDenied", 403),
            ("NotFound", 404),
            ("Conflict", 409),
            ("InvalidTransition", 409),
        ],
    )
    def test_handler_maps_status_codes(self, exc_name, status_code):
        from core.domain import exceptions
        from core.domain.exception_handler import domain_exception_handler

        response = domain_exception_handler(getattr(exceptions, exc_name)("boom"), {"view": None})

        assert response.status_code == status_code
        assert response.data == {"detail": "boom"}

    def test_handler_ignores_foreign_exceptions(self):
        from core.domain.exception_handler import domain_exception_handler

        assert domain_exception_handler(RuntimeError("x"), {}) is None


# ════════════════════════════════════════════════════════════════════
#  Access Helper Unit Tests
# ════════════════════════════════════════════════════════════════════

class TestAccessHelpers:

    def _user(self, perms=()):
        user = MagicMock()
        user.is_superuser = False
        user.is_authenticated = True
        user.is_active = True
        user.has_perm.side_effect = lambda perm: perm in perms
        return user

    def test_first_matching_scope_rule_wins(self):
        from core.domain.access import apply_permission_scope

        user = self._user(perms=("reports.b", "reports.c"))
        qs = MagicMock()
        rules = [
            ("reports.a", lambda q, u: "all"),
            ("reports.b", lambda q, u: "assigned"),
            ("reports.c", lambda q, u: "own"),
        ]

        assert apply_permission_scope(qs, user, scope_rules=rules) == "assigned"

    def test_no_matching_rule_returns_empty(self):
        from core.domain.access import apply_permission_scope

        qs = MagicMock()
        apply_permission_scope(qs, self._user(), scope_rules=[("reports.a", lambda q, u: q)])

        qs.none.assert_called_once()

    def test_require_permission_is_or_logic(self):
        from core.domain.access import require_permission
        from core.domain.exceptions import PermissionDenied

        user = self._user(perms=("reports.b",))
        require_permission(user, "reports.a", "reports.b")
        with pytest.raises(PermissionDenied, match="nope"):
            require_permission(user, "reports.a", message="nope")

    def test_require_authenticated(self):
        from core.domain.access import require_authenticated
        from core.domain.exceptions import Unauthorized

        with pytest.raises(Unauthorized):
            require_authenticated(None)
        inactive = self._user()
        inactive.is_active = False
        with pytest.raises(Unauthorized):
            require_authenticated(inactive)
        require_authenticated(self._user())

    def test_get_user_role_name(self):
        from core.domain.access import get_user_role_name

        superuser = MagicMock(is_superuser=True)
        assert get_user_role_name(superuser) == "admin"

        user = self._user()
        user.role.name = "Field Worker"
        assert get_user_role_name(user) == "field_worker"
