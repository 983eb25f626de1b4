"""
Management command: setup_rbac
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Seeds the database with the base **Roles** and links each role to its
set of Django permissions.

This command does NOT create Permission objects.  Standard CRUD
permissions and the custom ``Meta.permissions`` entries are inserted by
``migrate`` (or by the test database setup).

The command is **idempotent**: existing roles are updated and their
permission sets replaced to match the mapping below.

Usage::

    python manage.py setup_rbac
"""

from django.contrib.auth.models import Permission
from django.core.management.base import BaseCommand

from accounts.models import Role
from core.permissions_constants import AccountsPerms, ReportsPerms

A = AccountsPerms.full
R = ReportsPerms.full

# ────────────────────────────────────────────────────────────────────
# Role → Permission mapping
# ────────────────────────────────────────────────────────────────────
# Key:   (role_name, description, hierarchy_level)
# Value: list of "app_label.codename" strings

ROLE_PERMISSIONS_MAP: dict[tuple[str, str, int], list[str]] = {

    # ── Administrator ───────────────────────────────────────────────
    (
        "Admin",
        "City-wide access: sees every report, reassigns departments, manages users.",
        100,
    ): [
        A(AccountsPerms.VIEW_ROLE), A(AccountsPerms.ADD_ROLE),
        A(AccountsPerms.CHANGE_ROLE), A(AccountsPerms.DELETE_ROLE),
        A(AccountsPerms.VIEW_USER), A(AccountsPerms.ADD_USER),
        A(AccountsPerms.CHANGE_USER), A(AccountsPerms.DELETE_USER),
        A(AccountsPerms.CAN_MANAGE_USERS), A(AccountsPerms.CAN_VIEW_WORKERS),
        R(ReportsPerms.VIEW_REPORT), R(ReportsPerms.CHANGE_REPORT),
        R(ReportsPerms.DELETE_REPORT),
        R(ReportsPerms.VIEW_REPORTHISTORYENTRY),
        R(ReportsPerms.VIEW_DEPARTMENT), R(ReportsPerms.ADD_DEPARTMENT),
        R(ReportsPerms.CHANGE_DEPARTMENT), R(ReportsPerms.DELETE_DEPARTMENT),
        R(ReportsPerms.CAN_CHANGE_REPORT_STATUS),
        R(ReportsPerms.CAN_ADD_REPORT_NOTE),
        R(ReportsPerms.CAN_CLASSIFY_REPORT),
        R(ReportsPerms.CAN_REASSIGN_REPORT),
        R(ReportsPerms.CAN_VIEW_REPORT_STATS),
        R(ReportsPerms.CAN_SCOPE_ALL_REPORTS),
    ],

    # ── Department Supervisor ───────────────────────────────────────
    (
        "Supervisor",
        "Owns a department: triages its reports and dispatches workers.",
        50,
    ): [
        A(AccountsPerms.CAN_VIEW_WORKERS),
        R(ReportsPerms.VIEW_REPORT),
        R(ReportsPerms.VIEW_REPORTHISTORYENTRY),
        R(ReportsPerms.VIEW_DEPARTMENT),
        R(ReportsPerms.CAN_CHANGE_REPORT_STATUS),
        R(ReportsPerms.CAN_ADD_REPORT_NOTE),
        R(ReportsPerms.CAN_CLASSIFY_REPORT),
        R(ReportsPerms.CAN_ASSIGN_WORKER),
        R(ReportsPerms.CAN_VIEW_REPORT_STATS),
        R(ReportsPerms.CAN_SCOPE_ASSIGNED_REPORTS),
        R(ReportsPerms.CAN_BE_ASSIGNED_SUPERVISOR),
    ],

    # ── Field Worker ────────────────────────────────────────────────
    (
        "Worker",
        "Field staff: works the reports a supervisor dispatched to them.",
        20,
    ): [
        R(ReportsPerms.VIEW_REPORT),
        R(ReportsPerms.VIEW_REPORTHISTORYENTRY),
        R(ReportsPerms.CAN_ADD_REPORT_NOTE),
        R(ReportsPerms.CAN_SCOPE_WORKER_REPORTS),
        R(ReportsPerms.CAN_BE_ASSIGNED_WORKER),
    ],

    # ── Citizen ─────────────────────────────────────────────────────
    (
        "Citizen",
        "Default role for newly registered residents.",
        0,
    ): [
        R(ReportsPerms.VIEW_REPORT), R(ReportsPerms.ADD_REPORT),
        R(ReportsPerms.VIEW_REPORTHISTORYENTRY),
        R(ReportsPerms.CAN_VIEW_REPORT_STATS),
        R(ReportsPerms.CAN_SCOPE_OWN_REPORTS),
    ],
}


class Command(BaseCommand):
    help = (
        "Seeds the database with base Roles and maps each role to its "
        "Django permissions.  Safe to run multiple times (idempotent).  "
        "Does NOT create permissions — run `migrate` first."
    )

    def handle(self, *args, **options):
        self.stdout.write(self.style.MIGRATE_HEADING(
            "\n══════════════════════════════════════════"
            "\n  RBAC Setup — Seeding Roles & Permissions"
            "\n══════════════════════════════════════════\n"
        ))

        all_permissions: dict[str, Permission] = {
            f"{p.content_type.app_label}.{p.codename}": p
            for p in Permission.objects.select_related("content_type").all()
        }

        roles_created = 0
        roles_updated = 0
        warnings = 0

        for (role_name, description, hierarchy_level), perm_names in ROLE_PERMISSIONS_MAP.items():
            role, created = Role.objects.get_or_create(
                name=role_name,
                defaults={
                    "description": description,
                    "hierarchy_level": hierarchy_level,
                },
            )

            if not created and (
                role.description != description
                or role.hierarchy_level != hierarchy_level
            ):
                role.description = description
                role.hierarchy_level = hierarchy_level
                role.save(update_fields=["description", "hierarchy_level"])

            resolved_permissions: list[Permission] = []
            for perm_name in perm_names:
                perm = all_permissions.get(perm_name)
                if perm is not None:
                    resolved_permissions.append(perm)
                else:
                    warnings += 1
                    self.stdout.write(self.style.WARNING(
                        f"  ⚠  Permission '{perm_name}' not found — "
                        f"skipped for role '{role_name}'.  "
                        f"(Run migrate first?)"
                    ))

            role.permissions.set(resolved_permissions)

            if created:
                roles_created += 1
            else:
                roles_updated += 1

            self.stdout.write(self.style.SUCCESS(
                f"  ✔  {'Created' if created else 'Updated'} role: {role_name:<12s} "
                f"(hierarchy={hierarchy_level}, "
                f"permissions={len(resolved_permissions)})"
            ))

        summary = (
            f"  Done!  {roles_created} role(s) created, "
            f"{roles_updated} role(s) updated."
        )
        if warnings:
            summary += f"  ({warnings} permission warning(s) — see above.)"
        self.stdout.write(self.style.SUCCESS(summary + "\n"))
