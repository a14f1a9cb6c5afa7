"""
Django admin configuration for authentication models.

Related files:
    - models.py: User definition
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin configuration for User model.

    Customized for email-based authentication with a single display name.
    """

    list_display = ("email", "name", "is_active", "is_deleted", "date_joined")
    list_filter = ("is_active", "is_staff", "is_superuser", "is_deleted")
    search_fields = ("email", "name")
    ordering = ("-date_joined",)

    fieldsets = (
        (None, {"fields": ("email", "password", "name")}),
        (
            "Status",
            {"fields": ("is_active", "is_staff", "is_superuser", "is_deleted")},
        ),
        ("Permissions", {"fields": ("groups", "user_permissions")}),
        ("Important dates", {"fields": ("date_joined", "last_login", "deleted_at")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "name", "password1", "password2"),
            },
        ),
    )

    readonly_fields = ("date_joined", "last_login", "deleted_at")
