"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``rbac`` fixture seeding the default roles via ``setup_rbac``.
  - ``create_user`` factory fixture for creating test users.
  - ``auth_header`` fixture for authenticated requests (JWT).
  - ``fake_media_store`` / ``fake_classifier`` / ``fake_locator``
    in-memory stand-ins for the external report collaborators.
"""

from __future__ import annotations

import pytest
from django.core.management import call_command
from rest_framework.test import APIClient

from core.domain.exceptions import EnrichmentFailed


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def rbac(db) -> dict:
    """Seed Admin / Supervisor / Worker / Citizen and return them by name."""
    from accounts.models import Role

    call_command("setup_rbac", verbosity=0)
    return {role.name: role for role in Role.objects.all()}


@pytest.fixture()
def create_user(db, rbac):
    """
    Factory fixture that creates a user with sensible defaults.

    Usage::

        def test_something(create_user):
            user = create_user(username="alice")
            supervisor = create_user(role_name="Supervisor")
    """
    from accounts.models import User

    _counter = 0

    def _factory(
        *,
        username: str | None = None,
        password: str = "TestPass123!",
        email: str | None = None,
        phone_number: str | None = None,
        role=None,
        role_name: str | None = None,
        is_active: bool = True,
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if username is None:
            username = f"testuser{_counter}"
        if email is None:
            email = f"{username}@test.local"
        if phone_number is None:
            phone_number = f"0912{_counter:07d}"
        if role_name is not None:
            role = rbac[role_name]

        user = User.objects.create_user(
            username=username,
            password=password,
            email=email,
            phone_number=phone_number,
            is_active=is_active,
            **kwargs,
        )
        if role is not None:
            user.role = role
            user.save(update_fields=["role"])
        return user

    return _factory


@pytest.fixture()
def auth_header(create_user):
    """
    Returns a helper that creates a user and returns an ``Authorization``
    header dict with a valid JWT access token, plus the user.

    Usage::

        def test_protected(auth_header, api_client):
            header, user = auth_header(role_name="Citizen")
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(*, username: str | None = None, **user_kwargs):
        user = create_user(username=username, **user_kwargs)
        token = AccessToken.for_user(user)
        return {"Authorization": f"Bearer {token}"}, user

    return _make


# ── External collaborator stand-ins ──────────────────────────────────


class FakeMediaStore:
    def __init__(self, fail_on: tuple[str, ...] = ()):
        self.fail_on = fail_on
        self.uploads: list[tuple[bytes, str]] = []

    def upload(self, data: bytes, mime_type: str) -> str:
        if mime_type.split("/")[0] in self.fail_on:
            raise EnrichmentFailed("upload refused", step="media")
        self.uploads.append((data, mime_type))
        return f"https://media.test/{len(self.uploads)}.{mime_type.split('/')[-1]}"


class FakeClassifier:
    def __init__(self, label: str | None = "High"):
        self.label = label
        self.calls: list[str] = []

    def classify(self, text: str) -> str:
        self.calls.append(text)
        if self.label is None:
            raise EnrichmentFailed("classifier down", step="priority")
        return self.label


class FakeLocator:
    def __init__(self, location: tuple[float, float] | None = None):
        self.location = location

    def locate(self, actor) -> tuple[float, float]:
        if self.location is None:
            raise EnrichmentFailed("no fix", step="location")
        return self.location


@pytest.fixture()
def fake_media_store():
    return FakeMediaStore()


@pytest.fixture()
def fake_classifier():
    return FakeClassifier()


@pytest.fixture()
def fake_locator():
    return FakeLocator()


@pytest.fixture()
def offline_collaborators(settings):
    """Point the configured collaborators at implementations that never hit the network."""
    settings.CLOUDINARY_CLOUD_NAME = ""
    settings.CLOUDINARY_UPLOAD_PRESET = ""
    settings.PRIORITY_CLASSIFIER_API_KEY = ""
    settings.REPORTS_LOCATION_PROVIDER = "reports.integrations.NoLocationProvider"
    return settings


@pytest.fixture()
def make_report(create_user):
    """
    Factory for persisted reports that bypasses the submission workflow.

    ``created_at`` may be given to backdate the row (it is otherwise set
    by ``auto_now_add``).
    """
    from reports.models import ISSUE_CATEGORIES, Report

    def _factory(*, reporter=None, issue_type: str = "road", created_at=None, **fields) -> Report:
        category = ISSUE_CATEGORIES[issue_type]
        report = Report.objects.create(
            reporter=reporter or create_user(role_name="Citizen"),
            issue_type=issue_type,
            issue_label=fields.pop("issue_label", category.label),
            assigned_dept=fields.pop("assigned_dept", category.department),
            **fields,
        )
        if created_at is not None:
            Report.objects.filter(pk=report.pk).update(created_at=created_at)
            report.refresh_from_db()
        return report

    return _factory
