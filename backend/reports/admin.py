from django.contrib import admin

from .models import Department, Report, ReportHistoryEntry


class ReportHistoryEntryInline(admin.TabularInline):
    model = ReportHistoryEntry
    extra = 0
    can_delete = False
    readonly_fields = ("sequence", "kind", "status", "classification",
                       "assigned_dept", "assigned_to", "assigned_to_worker",
                       "changed_by", "changed_at", "note")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ("id", "issue_label", "status", "priority",
                    "assigned_dept", "assigned_to", "created_at")
    list_filter = ("status", "priority", "issue_type", "assigned_dept")
    search_fields = ("description", "issue_label", "custom_issue")
    readonly_fields = ("id", "reporter", "image_url", "audio_url",
                       "latitude", "longitude", "created_at", "updated_at")
    inlines = [ReportHistoryEntryInline]


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ("key", "name", "supervisor")


@admin.register(ReportHistoryEntry)
class ReportHistoryEntryAdmin(admin.ModelAdmin):
    list_display = ("report", "sequence", "kind", "status",
                    "changed_by", "changed_at")
    list_filter = ("kind",)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
