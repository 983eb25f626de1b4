import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Department",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "key",
                    models.CharField(
                        choices=[
                            ("roads", "Roads"),
                            ("electrical", "Electrical"),
                            ("sanitation", "Sanitation"),
                            ("water", "Water"),
                            ("parks", "Parks"),
                            ("others", "Others"),
                            ("none", "Unassigned"),
                        ],
                        max_length=20,
                        unique=True,
                        verbose_name="Department Key",
                    ),
                ),
                ("name", models.CharField(max_length=100, verbose_name="Display Name")),
                (
                    "supervisor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="supervised_departments",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Supervisor",
                    ),
                ),
            ],
            options={
                "verbose_name": "Department",
                "verbose_name_plural": "Departments",
                "ordering": ["key"],
            },
        ),
        migrations.CreateModel(
            name="Report",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Submitted At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Last Updated")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("description", models.TextField(blank=True, default="", verbose_name="Description")),
                (
                    "issue_type",
                    models.CharField(
                        choices=[
                            ("road", "Pothole / Road Damage"),
                            ("streetlight", "Streetlight / Electricity"),
                            ("sanitation", "Garbage / Sanitation"),
                            ("water", "Water / Drainage"),
                            ("tree", "Tree / Vegetation"),
                            ("others", "Other"),
                        ],
                        db_index=True,
                        max_length=20,
                        verbose_name="Issue Type",
                    ),
                ),
                ("issue_label", models.CharField(max_length=100, verbose_name="Issue Label")),
                (
                    "custom_issue",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Only populated for the 'others' category.",
                        max_length=255,
                        verbose_name="Custom Issue",
                    ),
                ),
                ("image_url", models.URLField(blank=True, max_length=500, null=True, verbose_name="Image URL")),
                ("audio_url", models.URLField(blank=True, max_length=500, null=True, verbose_name="Audio URL")),
                ("latitude", models.FloatField(blank=True, null=True)),
                ("longitude", models.FloatField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("submitted", "Submitted"),
                            ("acknowledged", "Acknowledged"),
                            ("in_progress", "In Progress"),
                            ("resolved", "Resolved"),
                        ],
                        db_index=True,
                        default="submitted",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "priority",
                    models.CharField(
                        choices=[
                            ("Low", "Low"),
                            ("Medium", "Medium"),
                            ("High", "High"),
                            ("Not Specified", "Not Specified"),
                        ],
                        default="Not Specified",
                        max_length=20,
                        verbose_name="Priority",
                    ),
                ),
                ("classification", models.CharField(blank=True, default="", max_length=100, verbose_name="Classification")),
                ("classification_note", models.TextField(blank=True, default="", verbose_name="Classification Note")),
                (
                    "assigned_dept",
                    models.CharField(
                        choices=[
                            ("roads", "Roads"),
                            ("electrical", "Electrical"),
                            ("sanitation", "Sanitation"),
                            ("water", "Water"),
                            ("parks", "Parks"),
                            ("others", "Others"),
                            ("none", "Unassigned"),
                        ],
                        db_index=True,
                        default="none",
                        max_length=20,
                        verbose_name="Assigned Department",
                    ),
                ),
                (
                    "assigned_to",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="supervised_reports",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Assigned Supervisor",
                    ),
                ),
                (
                    "assigned_to_worker",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="worker_reports",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Assigned Worker",
                    ),
                ),
                (
                    "reporter",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reports",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Reporter",
                    ),
                ),
            ],
            options={
                "verbose_name": "Report",
                "verbose_name_plural": "Reports",
                "ordering": ["-created_at"],
                "permissions": [
                    ("can_change_report_status", "Can change report status"),
                    ("can_add_report_note", "Can add a note to a report"),
                    ("can_classify_report", "Can classify a report"),
                    ("can_reassign_report", "Can reassign a report's department and supervisor"),
                    ("can_assign_worker", "Can assign a worker to a report"),
                    ("can_view_report_stats", "Can view report statistics"),
                    ("can_scope_all_reports", "Can see all reports"),
                    ("can_scope_assigned_reports", "Can see reports assigned as supervisor"),
                    ("can_scope_worker_reports", "Can see reports assigned as worker"),
                    ("can_scope_own_reports", "Can see own submitted reports"),
                    ("can_be_assigned_supervisor", "Can be assigned reports as supervisor"),
                    ("can_be_assigned_worker", "Can be assigned reports as worker"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReportHistoryEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sequence", models.PositiveIntegerField(verbose_name="Sequence")),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("status", "Status Change"),
                            ("assignment", "Assignment"),
                            ("classification", "Classification"),
                            ("note", "Note"),
                        ],
                        max_length=20,
                        verbose_name="Kind",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("submitted", "Submitted"),
                            ("acknowledged", "Acknowledged"),
                            ("in_progress", "In Progress"),
                            ("resolved", "Resolved"),
                        ],
                        default="",
                        max_length=20,
                    ),
                ),
                ("classification", models.CharField(blank=True, default="", max_length=100)),
                (
                    "assigned_dept",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("roads", "Roads"),
                            ("electrical", "Electrical"),
                            ("sanitation", "Sanitation"),
                            ("water", "Water"),
                            ("parks", "Parks"),
                            ("others", "Others"),
                            ("none", "Unassigned"),
                        ],
                        default="",
                        max_length=20,
                    ),
                ),
                ("changed_at", models.DateTimeField(verbose_name="Changed At")),
                ("note", models.TextField(blank=True, default="", verbose_name="Note")),
                (
                    "assigned_to",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "assigned_to_worker",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "changed_by",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="report_history_entries",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Changed By",
                    ),
                ),
                (
                    "report",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="history",
                        to="reports.report",
                        verbose_name="Report",
                    ),
                ),
            ],
            options={
                "verbose_name": "Report History Entry",
                "verbose_name_plural": "Report History Entries",
                "ordering": ["report", "sequence"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("report", "sequence"),
                        name="unique_report_history_sequence",
                    ),
                ],
            },
        ),
    ]
