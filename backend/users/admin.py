"""
Django admin configuration for users and pending passcodes.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser, OneTimePasscode


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    """Default UserAdmin plus role and budgeting profile fields."""

    list_display = ("username", "email", "role", "currency", "is_active", "is_staff")
    list_filter = UserAdmin.list_filter + ("role",)

    fieldsets = UserAdmin.fieldsets + (
        ("Budget Profile", {"fields": ("role", "currency", "monthly_income")}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ("Budget Profile", {"fields": ("email", "role", "currency", "monthly_income")}),
    )


@admin.register(OneTimePasscode)
class OneTimePasscodeAdmin(admin.ModelAdmin):
    list_display = ("email", "attempts", "expires_at", "created_at")
    search_fields = ("email",)
    # Never expose or edit the hash
    exclude = ("code_hash",)
    readonly_fields = ("email", "attempts", "expires_at", "created_at")
