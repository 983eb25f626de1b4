"""
Accounts app models.

``Role`` carries a permission set and a hierarchy level; ``User`` holds
at most one role and answers ``has_perm`` from it.  The role is what
separates citizens, workers, supervisors and administrators.
"""

from django.contrib.auth.models import AbstractUser, Permission
from django.db import models

from core.permissions_constants import AccountsPerms


class Role(models.Model):
    """
    Admin-manageable role.

    Seeded by ``setup_rbac`` (Admin 100, Supervisor 50, Worker 20,
    Citizen 0).  ``hierarchy_level`` is informational: clients use it to
    order roles, while access checks go through permissions only.
    """

    name = models.CharField(max_length=100, unique=True, verbose_name="Role Name")
    description = models.TextField(blank=True, default="", verbose_name="Description")
    hierarchy_level = models.PositiveSmallIntegerField(
        default=0,
        verbose_name="Hierarchy Level",
        help_text="Higher value = more authority (e.g. Admin=100, Citizen=0).",
    )
    permissions = models.ManyToManyField(
        Permission,
        blank=True,
        verbose_name="Permissions",
        help_text="Specific permissions for this role.",
    )

    class Meta:
        verbose_name = "Role"
        verbose_name_plural = "Roles"
        ordering = ["-hierarchy_level"]

    def __str__(self):
        return self.name


class User(AbstractUser):
    """
    A resident or a member of city staff.

    Email is unique and required; the phone number is optional but
    unique when given.  Any of username, email or phone number can be
    used to log in (see ``accounts.backends``).
    """

    email = models.EmailField(unique=True, verbose_name="Email Address")
    phone_number = models.CharField(
        max_length=15,
        unique=True,
        null=True,
        blank=True,
        verbose_name="Phone Number",
    )
    role = models.ForeignKey(
        Role,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users",
        verbose_name="Assigned Role",
    )

    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        permissions = [
            (AccountsPerms.CAN_MANAGE_USERS, "Admin-level user management"),
            (AccountsPerms.CAN_VIEW_WORKERS, "Can list the worker directory"),
        ]

    def __str__(self):
        return f"{self.username} ({self.role.name if self.role else 'No Role'})"

    @property
    def hierarchy_level(self) -> int:
        return self.role.hierarchy_level if self.role else 0

    # ── Role-backed permissions ──────────────────────────────────────

    def _role_permissions(self) -> frozenset[str]:
        cached = getattr(self, "_role_perm_cache", None)
        if cached is not None:
            return cached

        if not self.is_active:
            perms = Permission.objects.none()
        elif self.is_superuser:
            perms = Permission.objects.all()
        elif self.role_id:
            perms = self.role.permissions.all()
        else:
            perms = Permission.objects.none()

        cached = frozenset(
            f"{app_label}.{codename}"
            for app_label, codename in perms.values_list("content_type__app_label", "codename")
        )
        self._role_perm_cache = cached
        return cached

    def clear_permission_cache(self) -> None:
        """Forget the cached permission set after the role changes."""
        self.__dict__.pop("_role_perm_cache", None)

    def get_all_permissions(self, obj=None) -> set:
        return set(self._role_permissions())

    def has_perm(self, perm: str, obj=None) -> bool:
        if self.is_active and self.is_superuser:
            return True
        return perm in self._role_permissions()

    def has_perms(self, perm_list, obj=None) -> bool:
        return all(self.has_perm(perm, obj) for perm in perm_list)

    def has_module_perms(self, app_label: str) -> bool:
        if self.is_active and self.is_superuser:
            return True
        prefix = f"{app_label}."
        return any(perm.startswith(prefix) for perm in self._role_permissions())

    @property
    def permissions_list(self) -> list[str]:
        """Sorted permission strings, embedded in JWTs and the profile payload."""
        return sorted(self._role_permissions())
