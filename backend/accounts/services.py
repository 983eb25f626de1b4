"""
Accounts Service Layer.

Business rules for the ``accounts`` app.  Views validate with a
serializer, call one method here and serialize what comes back.

- ``UserRegistrationService`` — citizen sign-up.
- ``UserManagementService``   — user directory, role changes and the
                                worker directory supervisors dispatch from.
- ``CurrentUserService``      — the caller's own profile.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet

from core.domain.access import require_authenticated, require_permission
from core.domain.exceptions import Conflict, NotFound
from core.permissions_constants import AccountsPerms, ReportsPerms

from .models import Role

User = get_user_model()
logger = logging.getLogger(__name__)

#: Role given to every self-registered account.
DEFAULT_ROLE_NAME = "Citizen"

_MANAGE_USERS = AccountsPerms.full(AccountsPerms.CAN_MANAGE_USERS)


class UserRegistrationService:

    @staticmethod
    def taken_fields(data: dict[str, Any]) -> list[str]:
        """Names of the unique fields in ``data`` that another account already uses."""
        checks = (
            ("username", Q(username=data.get("username"))),
            ("email", Q(email__iexact=data.get("email"))),
            ("phone_number", Q(phone_number=data.get("phone_number"))),
        )
        return [
            name for name, lookup in checks
            if data.get(name) and User.objects.filter(lookup).exists()
        ]

    @staticmethod
    def register_user(validated_data: dict[str, Any]) -> User:
        """
        Create a citizen account.

        ``validated_data`` comes from ``RegisterRequestSerializer``.  The
        Citizen role is created on the fly if ``setup_rbac`` has not run.

        Raises
        ------
        Conflict
            Username, email or phone number already registered.
        """
        data = dict(validated_data)
        password = data.pop("password")

        taken = UserRegistrationService.taken_fields(data)
        if taken:
            raise Conflict(f"The following field(s) already exist: {', '.join(taken)}.")

        citizen_role, _ = Role.objects.get_or_create(
            name=DEFAULT_ROLE_NAME,
            defaults={"hierarchy_level": 0, "description": "Default role for newly registered residents."},
        )

        try:
            with transaction.atomic():
                user = User.objects.create_user(password=password, role=citizen_role, **data)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration.
            raise Conflict("A user with one of the provided unique fields already exists.") from exc

        logger.info("Registered citizen %s (id=%s)", user.username, user.pk)
        return user


class UserManagementService:
    """Operations administrators (and, for workers, supervisors) run on other users."""

    @staticmethod
    def list_users(actor: Any, filters: dict[str, Any] | None = None) -> QuerySet[User]:
        """
        The user directory, ordered by username.

        ``filters`` may hold ``role`` (Role PK), ``is_active`` and
        ``search`` (partial match on username, email, phone or name).
        """
        require_authenticated(actor)
        require_permission(actor, _MANAGE_USERS, message="Only administrators can browse the user directory.")

        filters = filters or {}
        qs = User.objects.select_related("role").order_by("username")

        if filters.get("role") is not None:
            qs = qs.filter(role_id=filters["role"])
        if filters.get("is_active") is not None:
            qs = qs.filter(is_active=filters["is_active"])
        search = filters.get("search")
        if search:
            qs = qs.filter(
                Q(username__icontains=search)
                | Q(email__icontains=search)
                | Q(phone_number__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
            )
        return qs

    @staticmethod
    def get_user(actor: Any, user_id: Any) -> User:
        require_authenticated(actor)
        require_permission(actor, _MANAGE_USERS, message="Only administrators can view other accounts.")
        try:
            return User.objects.select_related("role").get(pk=user_id)
        except (User.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"User with id {user_id} not found.")

    @staticmethod
    def assign_role(*, user_id: Any, role_id: int, performed_by: Any) -> User:
        """
        Give ``user_id`` the role ``role_id``; this is how staff accounts
        are created from registered citizens.

        Raises
        ------
        PermissionDenied
            ``performed_by`` lacks ``accounts.can_manage_users``.
        NotFound
            Unknown user or role.
        """
        target = UserManagementService.get_user(performed_by, user_id)
        try:
            role = Role.objects.get(pk=role_id)
        except Role.DoesNotExist:
            raise NotFound(f"Role with id {role_id} not found.")

        previous = target.role.name if target.role else None
        target.role = role
        target.save(update_fields=["role"])
        target.clear_permission_cache()

        logger.info(
            "User %s role changed %s -> %s by user %s",
            target.pk, previous, role.name, performed_by.pk,
        )
        return target

    @staticmethod
    def list_workers(actor: Any) -> QuerySet[User]:
        """
        Active users whose role lets them be dispatched onto a report,
        ordered by name.
        """
        require_authenticated(actor)
        require_permission(
            actor,
            AccountsPerms.full(AccountsPerms.CAN_VIEW_WORKERS),
            message="Only supervisors and administrators can list workers.",
        )
        return (
            User.objects.select_related("role")
            .filter(
                is_active=True,
                role__permissions__codename=ReportsPerms.CAN_BE_ASSIGNED_WORKER,
                role__permissions__content_type__app_label=ReportsPerms.APP_LABEL,
            )
            .distinct()
            .order_by("first_name", "last_name", "username")
        )


class CurrentUserService:

    @staticmethod
    def get_profile(user: Any) -> User:
        require_authenticated(user)
        return User.objects.select_related("role").get(pk=user.pk)

    @staticmethod
    def update_profile(user: Any, validated_data: dict[str, Any]) -> User:
        """Apply ``MeUpdateSerializer`` output; role and activation are out of reach."""
        require_authenticated(user)
        if validated_data:
            for field, value in validated_data.items():
                setattr(user, field, value)
            user.save(update_fields=list(validated_data))
        return user
