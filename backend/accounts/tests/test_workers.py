"""
Integration tests — worker directory.

Endpoint under test:  GET /api/accounts/workers/
"""

from __future__ import annotations

import pytest
from django.urls import reverse
from rest_framework import status

pytestmark = pytest.mark.django_db


class TestWorkerDirectory:

    def test_supervisor_sees_only_active_workers(self, api_client, create_user):
        supervisor = create_user(username="sup", role_name="Supervisor")
        create_user(username="zed", first_name="Zed", role_name="Worker")
        create_user(username="amir", first_name="Amir", role_name="Worker")
        create_user(username="gone", role_name="Worker", is_active=False)
        create_user(username="cit", role_name="Citizen")
        api_client.force_authenticate(supervisor)

        resp = api_client.get(reverse("accounts:worker-list"))

        assert resp.status_code == status.HTTP_200_OK
        assert [w["username"] for w in resp.data] == ["amir", "zed"]
        assert set(resp.data[0]) == {"id", "username", "full_name", "email", "phone_number"}

    def test_worker_cannot_list_workers(self, api_client, create_user):
        worker = create_user(role_name="Worker")
        api_client.force_authenticate(worker)

        resp = api_client.get(reverse("accounts:worker-list"))

        assert resp.status_code == status.HTTP_403_FORBIDDEN
