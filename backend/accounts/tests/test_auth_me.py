"""
Integration tests — current-user profile.

Endpoints under test:  GET / PATCH /api/accounts/me/
Auth scheme:           JWT Bearer (DEFAULT_AUTHENTICATION_CLASSES).
"""

from __future__ import annotations

import pytest
from django.urls import reverse
from rest_framework import status

pytestmark = pytest.mark.django_db


class TestMeEndpoint:

    def test_requires_authentication(self, api_client):
        resp = api_client.get(reverse("accounts:me"))

        assert resp.status_code == status.HTTP_401_UNAUTHORIZED

    def test_returns_profile_with_role_and_permissions(self, api_client, auth_header):
        header, user = auth_header(username="worker_me", role_name="Worker")
        api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])

        resp = api_client.get(reverse("accounts:me"))

        assert resp.status_code == status.HTTP_200_OK
        assert resp.data["id"] == user.pk
        assert resp.data["role_detail"]["name"] == "Worker"
        assert "reports.can_scope_worker_reports" in resp.data["permissions"]

    def test_patch_updates_contact_fields(self, api_client, auth_header):
        header, user = auth_header(username="citizen_me", role_name="Citizen")
        api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])

        resp = api_client.patch(
            reverse("accounts:me"),
            {"first_name": "Sara", "phone_number": "+989121112233"},
            format="json",
        )

        assert resp.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.first_name == "Sara"
        assert user.phone_number == "+989121112233"
        assert user.role.name == "Citizen"
