from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Role, User


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name", "hierarchy_level", "user_count")
    filter_horizontal = ("permissions",)

    @admin.display(description="Users")
    def user_count(self, obj):
        return obj.users.count()


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "phone_number", "role", "is_active")
    list_filter = ("role", "is_active", "is_staff")
    list_select_related = ("role",)
    search_fields = ("username", "email", "phone_number", "first_name", "last_name")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Reporting", {"fields": ("phone_number", "role")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Reporting", {"fields": ("email", "phone_number", "role")}),
    )
