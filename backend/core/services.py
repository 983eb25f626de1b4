"""
Core app services — **Service Layer**.

Holds cross-app read-only helpers.  The core app may read models from
other apps, but must import them lazily (inside the method) or through
``django.apps.apps.get_model`` so that no import cycle can form at
module load time.
"""

from __future__ import annotations

from typing import Any

from django.apps import apps


# ═══════════════════════════════════════════════════════════════════
#  System Constants Service
# ═══════════════════════════════════════════════════════════════════

class SystemConstantsService:
    """
    Gathers all system-wide choice enumerations, the category routing
    table and the role hierarchy into a single dict for the frontend.

    This service is **stateless** — it does not depend on the requesting
    user.  All constants are public information needed by clients to
    render dropdowns, filters and labels.
    """

    @staticmethod
    def get_constants() -> dict[str, Any]:
        """Return all system constants as a dict."""
        from reports.models import (
            ISSUE_CATEGORIES,
            DepartmentKey,
            HistoryKind,
            Priority,
            ReportStatus,
        )

        Role = apps.get_model("accounts", "Role")

        to_list = SystemConstantsService._choices_to_list

        roles = list(
            Role.objects
            .order_by("-hierarchy_level")
            .values("id", "name", "hierarchy_level")
        )

        return {
            "report_statuses": to_list(ReportStatus),
            "priorities": to_list(Priority),
            "departments": to_list(DepartmentKey),
            "issue_types": [
                {
                    "value": str(category.key),
                    "label": category.label,
                    "department": str(category.department),
                }
                for category in ISSUE_CATEGORIES.values()
            ],
            "history_kinds": to_list(HistoryKind),
            "role_hierarchy": roles,
        }

    @staticmethod
    def _choices_to_list(
        choices_class: type,
    ) -> list[dict[str, str]]:
        """
        Convert a Django ``TextChoices`` class to a list of
        ``{"value": ..., "label": ...}`` dicts.
        """
        return [
            {"value": str(value), "label": str(label)}
            for value, label in choices_class.choices
        ]
