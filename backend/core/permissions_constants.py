"""
Permissions Constants — **Single Source of Truth**

Every permission referenced in code (services, ``setup_rbac``, tests)
MUST use one of the constants defined here.

Organisation
------------
- **Standard CRUD** permissions follow Django's auto-generated naming:
  ``<action>_<model_lowercase>``. They are listed here so that the
  ``setup_rbac`` command can map them to roles without typos.

- **Custom workflow** permissions are constants that map to codenames
  registered via each model's ``Meta.permissions`` tuple. Adding a new
  custom permission requires:
    1. Add the constant below.
    2. Add the ``(codename, description)`` to the related model's
       ``Meta.permissions``.
    3. Run ``migrate`` to insert it into Django's ``auth_permission`` table.
    4. Add the constant to the appropriate role lists in ``setup_rbac``.

All constants store the **codename only** (no ``app_label.`` prefix).
Use ``ReportsPerms.full(...)`` when calling ``user.has_perm``.
"""


# ════════════════════════════════════════════════════════════════════
#  ACCOUNTS APP
# ════════════════════════════════════════════════════════════════════

class AccountsPerms:
    """Standard CRUD permissions for accounts models."""

    APP_LABEL = "accounts"

    # Role
    VIEW_ROLE = "view_role"
    ADD_ROLE = "add_role"
    CHANGE_ROLE = "change_role"
    DELETE_ROLE = "delete_role"

    # User
    VIEW_USER = "view_user"
    ADD_USER = "add_user"
    CHANGE_USER = "change_user"
    DELETE_USER = "delete_user"

    # ── Custom workflow permissions ─────────────────────────────────
    CAN_MANAGE_USERS = "can_manage_users"
    """Admin-level user management (activate, deactivate, assign roles)."""

    CAN_VIEW_WORKERS = "can_view_workers"
    """List the worker directory (supervisors picking a worker)."""

    @classmethod
    def full(cls, codename: str) -> str:
        return f"{cls.APP_LABEL}.{codename}"


# ════════════════════════════════════════════════════════════════════
#  REPORTS APP — Standard CRUD + Custom Workflow
# ════════════════════════════════════════════════════════════════════

class ReportsPerms:
    """Standard + custom permissions for the reports app."""

    APP_LABEL = "reports"

    # ── Report — standard CRUD ──────────────────────────────────────
    VIEW_REPORT = "view_report"
    ADD_REPORT = "add_report"
    CHANGE_REPORT = "change_report"
    DELETE_REPORT = "delete_report"

    # ── ReportHistoryEntry — standard CRUD ──────────────────────────
    VIEW_REPORTHISTORYENTRY = "view_reporthistoryentry"

    # ── Department — standard CRUD ──────────────────────────────────
    VIEW_DEPARTMENT = "view_department"
    ADD_DEPARTMENT = "add_department"
    CHANGE_DEPARTMENT = "change_department"
    DELETE_DEPARTMENT = "delete_department"

    # ── Custom workflow permissions ─────────────────────────────────
    CAN_CHANGE_REPORT_STATUS = "can_change_report_status"
    """Move a report forward through submitted → … → resolved."""

    CAN_ADD_REPORT_NOTE = "can_add_report_note"
    """Append a free-text note to a report's history."""

    CAN_CLASSIFY_REPORT = "can_classify_report"
    """Set the staff classification of a report."""

    CAN_REASSIGN_REPORT = "can_reassign_report"
    """Manually override the department / supervisor of a report (Admin)."""

    CAN_ASSIGN_WORKER = "can_assign_worker"
    """Assign a worker to a report the supervisor owns (Supervisor)."""

    CAN_VIEW_REPORT_STATS = "can_view_report_stats"
    """Read dashboard aggregates over the visible reports."""

    # ── Scope permissions (data-visibility tiers) ───────────────────
    CAN_SCOPE_ALL_REPORTS = "can_scope_all_reports"
    """Unrestricted report visibility (Admin)."""

    CAN_SCOPE_ASSIGNED_REPORTS = "can_scope_assigned_reports"
    """See reports assigned to this user as supervisor."""

    CAN_SCOPE_WORKER_REPORTS = "can_scope_worker_reports"
    """See reports assigned to this user as worker."""

    CAN_SCOPE_OWN_REPORTS = "can_scope_own_reports"
    """See only reports this user submitted (Citizen)."""

    # ── Assignment capability permissions ───────────────────────────
    CAN_BE_ASSIGNED_SUPERVISOR = "can_be_assigned_supervisor"
    CAN_BE_ASSIGNED_WORKER = "can_be_assigned_worker"

    @classmethod
    def full(cls, codename: str) -> str:
        return f"{cls.APP_LABEL}.{codename}"
