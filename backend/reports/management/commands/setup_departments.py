"""
Management command: setup_departments
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Seeds one ``Department`` row per routable department key and optionally
binds supervisors to them.

The command is **idempotent**: existing departments keep their
supervisor unless ``--supervisor`` names a new one.

Usage::

    python manage.py setup_departments
    python manage.py setup_departments --supervisor roads=alice --supervisor water=bob
"""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from core.permissions_constants import ReportsPerms
from reports.models import Department, DepartmentKey

User = get_user_model()


class Command(BaseCommand):
    help = "Create the department directory and optionally bind supervisors."

    def add_arguments(self, parser):
        parser.add_argument(
            "--supervisor",
            action="append",
            default=[],
            metavar="DEPT=USERNAME",
            help="Bind a supervisor to a department (repeatable).",
        )

    def _parse_supervisors(self, pairs: list[str]) -> dict[str, User]:
        bindings: dict[str, User] = {}
        for pair in pairs:
            dept, sep, username = pair.partition("=")
            if not sep or not username:
                raise CommandError(f"Expected DEPT=USERNAME, got '{pair}'.")
            if dept not in DepartmentKey.values or dept == DepartmentKey.NONE:
                raise CommandError(f"Unknown department '{dept}'.")
            try:
                user = User.objects.get(username=username)
            except User.DoesNotExist:
                raise CommandError(f"User '{username}' does not exist.")
            if not user.has_perm(ReportsPerms.full(ReportsPerms.CAN_BE_ASSIGNED_SUPERVISOR)):
                raise CommandError(
                    f"User '{username}' cannot be assigned as a supervisor.  "
                    f"(Run setup_rbac and assign the Supervisor role first?)"
                )
            bindings[dept] = user
        return bindings

    def handle(self, *args, **options):
        bindings = self._parse_supervisors(options["supervisor"])

        self.stdout.write(self.style.MIGRATE_HEADING(
            "\n══════════════════════════════════════════"
            "\n  Department Setup"
            "\n══════════════════════════════════════════\n"
        ))

        created_count = 0
        for key, label in DepartmentKey.choices:
            if key == DepartmentKey.NONE:
                continue

            department, created = Department.objects.get_or_create(
                key=key, defaults={"name": label},
            )
            created_count += int(created)

            supervisor = bindings.get(key)
            if supervisor is not None and department.supervisor_id != supervisor.pk:
                department.supervisor = supervisor
                department.save(update_fields=["supervisor"])

            holder = department.supervisor.username if department.supervisor else "—"
            self.stdout.write(self.style.SUCCESS(
                f"  ✔  {'Created' if created else 'Kept'} department: {key:<12s} "
                f"(supervisor={holder})"
            ))

        self.stdout.write(self.style.SUCCESS(
            f"  Done!  {created_count} department(s) created.\n"
        ))
