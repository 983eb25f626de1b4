"""
Core app serializers.

Response-only serializers for the cross-app constants endpoint; they
exist so the OpenAPI schema documents the payload shape.
"""

from rest_framework import serializers


class ChoiceItemSerializer(serializers.Serializer):
    """
    A single key-label pair representing one choice/enum option.

    Example::

        {"value": "in_progress", "label": "In Progress"}
    """

    value = serializers.CharField(
        help_text="Machine-readable value to send in API requests.",
    )
    label = serializers.CharField(
        help_text="Human-readable display label for the UI.",
    )


class IssueTypeItemSerializer(ChoiceItemSerializer):
    """A report category together with the department it routes to."""

    department = serializers.CharField(
        help_text="Department key reports of this category are routed to.",
    )


class RoleHierarchyItemSerializer(serializers.Serializer):
    """
    A single role with its hierarchy level.

    Example::

        {"id": 2, "name": "Supervisor", "hierarchy_level": 50}
    """

    id = serializers.IntegerField(help_text="Role PK.")
    name = serializers.CharField(help_text="Role display name.")
    hierarchy_level = serializers.IntegerField(
        help_text="Authority level (higher = more authority).",
    )


class SystemConstantsSerializer(serializers.Serializer):
    """
    Top-level response serializer for ``GET /api/core/constants/``.

    Response shape::

        {
            "report_statuses": [{"value": "submitted", "label": "Submitted"}, ...],
            "priorities": [...],
            "departments": [...],
            "issue_types": [
                {"value": "road", "label": "Pothole / Road Damage", "department": "roads"},
                ...
            ],
            "history_kinds": [...],
            "role_hierarchy": [
                {"id": 1, "name": "Admin", "hierarchy_level": 100},
                ...
            ]
        }
    """

    report_statuses = ChoiceItemSerializer(many=True)
    priorities = ChoiceItemSerializer(many=True)
    departments = ChoiceItemSerializer(many=True)
    issue_types = IssueTypeItemSerializer(many=True)
    history_kinds = ChoiceItemSerializer(many=True)
    role_hierarchy = RoleHierarchyItemSerializer(many=True)
