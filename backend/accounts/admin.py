from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "phone_number", "full_name", "email",
                    "role", "is_active", "total_cases_filed")
    search_fields = ("username", "email", "phone_number", "full_name")
    list_filter = ("is_active", "role")
    # Role and activation changes go through UserManagementService only.
    readonly_fields = ("role", "is_active", "total_cases_filed")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Portal Profile", {"fields": ("phone_number", "full_name", "address",
                                       "profile_picture_url", "role",
                                       "total_cases_filed")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Portal Profile", {"fields": ("email", "phone_number", "full_name")}),
    )
