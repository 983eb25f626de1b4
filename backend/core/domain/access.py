"""
core.domain.access — actor guards and permission-scoped querysets.

Each app's ``services.py`` owns its scope rules; this module only knows
how to apply them.  A scope rule is ``(permission, filter_fn)``, and the
first permission the actor holds picks the filter::

    REPORT_SCOPE_RULES = [
        ("reports.can_scope_all_reports",      lambda qs, u: qs),
        ("reports.can_scope_assigned_reports", lambda qs, u: qs.filter(assigned_to=u)),
        ("reports.can_scope_own_reports",      lambda qs, u: qs.filter(reporter=u)),
    ]

    visible = apply_permission_scope(Report.objects.all(), user, scope_rules=REPORT_SCOPE_RULES)

Access decisions are made on permissions, never on role names.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Sequence

from django.db.models import QuerySet

from core.domain.exceptions import PermissionDenied, Unauthorized

if TYPE_CHECKING:
    from accounts.models import User

ScopeRule = tuple[str, Callable[[QuerySet, "User"], QuerySet]]


def require_authenticated(actor: Any) -> None:
    """Raise ``Unauthorized`` unless ``actor`` is an active, authenticated user."""
    if actor is None or not getattr(actor, "is_authenticated", False):
        raise Unauthorized()
    if not getattr(actor, "is_active", True):
        raise Unauthorized("This account is disabled.")


def require_permission(user: User, *perms: str, message: str = "") -> None:
    """
    Raise ``PermissionDenied`` unless ``user`` holds at least one of
    ``perms`` (full ``app_label.codename`` strings).
    """
    if any(user.has_perm(perm) for perm in perms):
        return
    raise PermissionDenied(message or f"Missing required permission: {', '.join(perms)}.")


def apply_permission_scope(
    queryset: QuerySet,
    user: User,
    *,
    scope_rules: Sequence[ScopeRule],
) -> QuerySet:
    """
    Narrow ``queryset`` with the first rule whose permission ``user`` holds.

    Rules go from broadest to narrowest.  A user matching no rule sees
    nothing.
    """
    for perm, filter_fn in scope_rules:
        if user.has_perm(perm):
            return filter_fn(queryset, user)
    return queryset.none()


def get_user_role_name(user: User) -> str | None:
    """
    Snake-cased role name (``"admin"`` for superusers), or ``None``.

    For log lines and token claims only.
    """
    if user.is_superuser:
        return "admin"
    role = getattr(user, "role", None)
    if role is None:
        return None
    return role.name.lower().replace(" ", "_")
