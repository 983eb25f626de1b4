"""
Integration tests — login with any one identifier.

Endpoint under test:  POST /api/accounts/auth/login/
Request payload:      {"identifier": "<username|email|phone>", "password": "..."}
Success response:     HTTP 200 with {"access", "refresh", "user"}.
Failure response:     HTTP 400 with "Invalid credentials.".
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import Role

User = get_user_model()

_PASSWORD = "Str0ng!Pass99"

_USER_FIELDS = {
    "username": "login_test_user",
    "email": "login_test_user@example.com",
    "phone_number": "09130000099",
    "first_name": "Login",
    "last_name": "Tester",
}


class TestAuthLoginMultiIdentifier(TestCase):

    @classmethod
    def setUpTestData(cls):
        call_command("setup_rbac", verbosity=0)
        cls.user = User.objects.create_user(password=_PASSWORD, **_USER_FIELDS)
        cls.user.role = Role.objects.get(name="Supervisor")
        cls.user.save(update_fields=["role"])

    def setUp(self):
        self.client = APIClient()
        self.login_url = reverse("accounts:login")

    def _post_login(self, identifier: str, password: str):
        return self.client.post(
            self.login_url,
            {"identifier": identifier, "password": password},
            format="json",
        )

    def _assert_success(self, resp):
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertIn("access", resp.data)
        self.assertIn("refresh", resp.data)
        self.assertEqual(resp.data["user"]["username"], _USER_FIELDS["username"])

    def test_login_with_username(self):
        self._assert_success(self._post_login(_USER_FIELDS["username"], _PASSWORD))

    def test_login_with_email_is_case_insensitive(self):
        self._assert_success(self._post_login(_USER_FIELDS["email"].upper(), _PASSWORD))

    def test_login_with_phone_number(self):
        self._assert_success(self._post_login(_USER_FIELDS["phone_number"], _PASSWORD))

    def test_token_carries_role_claims(self):
        resp = self._post_login(_USER_FIELDS["username"], _PASSWORD)

        token = AccessToken(resp.data["access"])
        self.assertEqual(token["role"], "Supervisor")
        self.assertEqual(token["role_key"], "supervisor")
        self.assertEqual(token["hierarchy_level"], 50)
        self.assertIn("reports.can_assign_worker", token["permissions_list"])

    def test_wrong_password_is_rejected(self):
        resp = self._post_login(_USER_FIELDS["username"], "wrong-password")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertNotIn("access", resp.data)

    def test_inactive_user_cannot_log_in(self):
        User.objects.filter(pk=self.user.pk).update(is_active=False)

        resp = self._post_login(_USER_FIELDS["username"], _PASSWORD)

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
