"""
Authentication models.

This module defines the account model:
- User: Custom user model with email-based authentication and a display name

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: AccountService business logic
    - jwt.py: Access/refresh token handling

Soft delete:
    Deleting an account keeps the row (memberships and messages still
    reference it) and deactivates it, so token authentication rejects it.
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager
from core.model_mixins import SoftDeleteMixin, UUIDPrimaryKeyMixin


class User(UUIDPrimaryKeyMixin, SoftDeleteMixin, AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        name: Display name shown next to messages and in member lists
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified
        is_deleted / deleted_at: Soft delete state (SoftDeleteMixin)

    Usage:
        user = User.objects.create_user(
            email="user@example.com",
            password="securepassword",
            name="Alice",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    name = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="Display name",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    soft_delete_update_fields = ("is_active",)

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name or self.email.split("@")[0]

    def on_soft_delete(self) -> None:
        self.is_active = False

    def on_restore(self) -> None:
        self.is_active = True
