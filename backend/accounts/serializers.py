"""
Accounts app serializers.

Input serializers check formats only (phone pattern, password
confirmation).  Uniqueness of username / email / phone is decided by
``accounts.services`` so that clashes come back as 409 rather than 400,
which is why the model-level unique validators are stripped below.
"""

from __future__ import annotations

import re
from typing import Any

from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers
from rest_framework.validators import UniqueValidator
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from core.domain.access import get_user_role_name

from .models import Role

User = get_user_model()

PHONE_NUMBER_RE = re.compile(r"^\+?\d{7,15}$")


def _clean_phone(value: str | None) -> str | None:
    if not value:
        return None
    if not PHONE_NUMBER_RE.match(value):
        raise serializers.ValidationError(
            "Phone number must contain 7 to 15 digits, optionally prefixed with '+'."
        )
    return value


def _without_unique_validators(fields: dict, names: tuple[str, ...]) -> dict:
    for name in names:
        fields[name].validators = [
            v for v in fields[name].validators if not isinstance(v, UniqueValidator)
        ]
    return fields


# ── Authentication ───────────────────────────────────────────────────


class RegisterRequestSerializer(serializers.ModelSerializer):
    """
    Citizen self-registration.

    ``username``, ``email``, ``password`` and ``password_confirm`` are
    required.  The role is never accepted from the client.
    """

    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Minimum 8 characters.",
    )
    password_confirm = serializers.CharField(write_only=True, style={"input_type": "password"})

    class Meta:
        model = User
        fields = [
            "username", "password", "password_confirm",
            "email", "phone_number", "first_name", "last_name",
        ]
        extra_kwargs = {
            "email": {"required": True},
            "phone_number": {"required": False},
        }

    def get_fields(self):
        return _without_unique_validators(
            super().get_fields(), ("username", "email", "phone_number"),
        )

    def validate_phone_number(self, value: str | None) -> str | None:
        return _clean_phone(value)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if attrs["password"] != attrs.pop("password_confirm"):
            raise serializers.ValidationError({"password_confirm": "Passwords do not match."})
        return attrs


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    ``identifier`` + ``password`` login, where the identifier is a
    username, email or phone number.

    Access tokens carry ``role``, ``role_key``, ``hierarchy_level`` and
    ``permissions_list`` so clients can pick a dashboard without a
    second request.
    """

    username_field = "identifier"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["identifier"] = serializers.CharField(help_text="Username, Email, or Phone Number.")

    @classmethod
    def get_token(cls, user) -> Any:
        token = super().get_token(user)
        token["role"] = user.role.name if user.role else None
        token["role_key"] = get_user_role_name(user)
        token["hierarchy_level"] = user.hierarchy_level
        token["permissions_list"] = user.permissions_list
        return token

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        user = authenticate(
            request=self.context.get("request"),
            identifier=attrs.get("identifier"),
            password=attrs.get("password"),
        )
        if user is None:
            raise serializers.ValidationError({"detail": "Invalid credentials."}, code="authentication")

        self.user = user
        refresh = self.get_token(user)
        return {"access": str(refresh.access_token), "refresh": str(refresh)}


# ── Users & roles ────────────────────────────────────────────────────


class RoleListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Role
        fields = ["id", "name", "description", "hierarchy_level"]
        read_only_fields = fields


class UserListSerializer(serializers.ModelSerializer):
    role_name = serializers.CharField(source="role.name", read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            "id", "username", "email", "phone_number",
            "first_name", "last_name", "is_active", "role", "role_name",
        ]
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Profile payload for ``/me/``, registration and user detail.

    ``permissions`` lists ``app_label.codename`` strings, e.g.
    ``reports.can_change_report_status``.
    """

    role_detail = RoleListSerializer(source="role", read_only=True)
    permissions = serializers.ListField(
        child=serializers.CharField(), source="permissions_list", read_only=True,
    )

    class Meta:
        model = User
        fields = [
            "id", "username", "email", "phone_number", "first_name", "last_name",
            "is_active", "date_joined", "role", "role_detail", "permissions",
        ]
        read_only_fields = fields


class WorkerSerializer(serializers.ModelSerializer):
    """Directory entry shown to supervisors when dispatching."""

    full_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "username", "full_name", "email", "phone_number"]
        read_only_fields = fields

    def get_full_name(self, obj) -> str:
        return obj.get_full_name() or obj.username


class AssignRoleSerializer(serializers.Serializer):
    role_id = serializers.IntegerField(help_text="PK of the Role to assign.")


class MeUpdateSerializer(serializers.ModelSerializer):
    """Self-service profile edit; username and role are not editable here."""

    class Meta:
        model = User
        fields = ["email", "phone_number", "first_name", "last_name"]

    def _taken(self, **lookup) -> bool:
        others = User.objects.all()
        if self.instance is not None:
            others = others.exclude(pk=self.instance.pk)
        return others.filter(**lookup).exists()

    def validate_email(self, value: str) -> str:
        if self._taken(email__iexact=value):
            raise serializers.ValidationError("This email is already in use by another account.")
        return value

    def validate_phone_number(self, value: str | None) -> str | None:
        value = _clean_phone(value)
        if value and self._taken(phone_number=value):
            raise serializers.ValidationError("This phone number is already in use by another account.")
        return value


class UserFilterSerializer(serializers.Serializer):
    """Query parameters for ``GET /users/``."""

    role = serializers.IntegerField(required=False, min_value=1, help_text="Role PK.")
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
    search = serializers.CharField(required=False, max_length=150)
