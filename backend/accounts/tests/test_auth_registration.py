"""
Integration tests — self-service registration.

Endpoint under test:  POST /api/accounts/auth/register/
                      (named URL: accounts:register)
Success response:     HTTP 201 with the created user's profile; the user
                      holds the "Citizen" role.
Failure responses:    HTTP 400 on validation errors, HTTP 409 when a unique
                      identifier is already taken.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

User = get_user_model()

_PASSWORD = "Civic!Pass2024"


class TestAuthRegistration(TestCase):

    @classmethod
    def setUpTestData(cls):
        call_command("setup_rbac", verbosity=0)

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("accounts:register")

    def _payload(self, **overrides):
        payload = {
            "username": "new_citizen",
            "email": "new_citizen@example.com",
            "phone_number": "09120001111",
            "password": _PASSWORD,
            "password_confirm": _PASSWORD,
            "first_name": "Nadia",
            "last_name": "Rahimi",
        }
        payload.update(overrides)
        return payload

    def test_register_assigns_citizen_role(self):
        resp = self.client.post(self.url, self._payload(), format="json")

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
        user = User.objects.get(username="new_citizen")
        self.assertTrue(user.check_password(_PASSWORD))
        self.assertEqual(user.role.name, "Citizen")
        self.assertIn("reports.can_scope_own_reports", resp.data["permissions"])
        self.assertNotIn("password", resp.data)

    def test_password_mismatch_is_rejected(self):
        resp = self.client.post(
            self.url, self._payload(password_confirm="Other!Pass2024"), format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password_confirm", resp.data)
        self.assertFalse(User.objects.filter(username="new_citizen").exists())

    def test_duplicate_email_returns_conflict(self):
        User.objects.create_user(
            username="existing", email="new_citizen@example.com", password=_PASSWORD,
        )

        resp = self.client.post(self.url, self._payload(), format="json")

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertIn("email", resp.data["detail"])

    def test_duplicate_username_and_phone_listed_together(self):
        User.objects.create_user(
            username="new_citizen",
            email="someone@example.com",
            phone_number="09120001111",
            password=_PASSWORD,
        )

        resp = self.client.post(self.url, self._payload(), format="json")

        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertIn("username", resp.data["detail"])
        self.assertIn("phone_number", resp.data["detail"])

    def test_malformed_phone_number_is_rejected(self):
        resp = self.client.post(self.url, self._payload(phone_number="call-me"), format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("phone_number", resp.data)
