"""
Custom QuerySet and Manager classes for soft-deletable models.

Manager vs QuerySet:
    - QuerySet: Defines chainable methods (filter, exclude, etc.)
    - Manager: Attaches QuerySet to model, defines table-level operations

Usage:
    from core.managers import SoftDeleteManager

    class Chat(SoftDeleteMixin, BaseModel):
        objects = SoftDeleteManager()  # Default: excludes deleted
        all_objects = models.Manager()  # Includes deleted

    Chat.objects.all()                  # Only active chats
    Chat.objects.with_deleted()         # Everything

Related:
    - core.model_mixins.SoftDeleteMixin: Model mixin for soft delete fields
"""

from __future__ import annotations

from django.db import models


class SoftDeleteQuerySet(models.QuerySet):
    """
    QuerySet that provides soft delete operations.

    Methods:
        delete(): Soft delete (marks is_deleted=True)
        hard_delete(): Permanent delete

    Note:
        The default filtering of deleted records happens in SoftDeleteManager,
        not in this QuerySet, so all_objects can share the same QuerySet.
    """

    def delete(self) -> tuple[int, dict[str, int]]:
        """
        Soft delete all objects in queryset.

        Goes through each instance's soft_delete() so that model hooks
        (e.g. status flags kept in sync with is_deleted) are persisted.

        Returns:
            Tuple of (count, {model_name: count}) matching Django's delete()
        """
        instances = list(self.filter(is_deleted=False))
        for instance in instances:
            instance.soft_delete()

        count = len(instances)
        return count, {self.model._meta.label: count}

    def hard_delete(self) -> tuple[int, dict[str, int]]:
        """
        Permanently delete all objects in queryset.

        Warning:
            This cannot be undone.
        """
        return super().delete()


class SoftDeleteManager(models.Manager):
    """
    Manager that filters out soft-deleted records by default.

    Use as the default manager on models with SoftDeleteMixin.
    Always pair with a standard Manager for accessing deleted records.
    """

    def get_queryset(self) -> SoftDeleteQuerySet:
        """Return queryset excluding soft-deleted records."""
        return SoftDeleteQuerySet(self.model, using=self._db).filter(is_deleted=False)

    def with_deleted(self) -> SoftDeleteQuerySet:
        """
        Get queryset including deleted records.

        Example:
            ChatUser.objects.with_deleted().filter(chat=chat, user=user)
        """
        return SoftDeleteQuerySet(self.model, using=self._db)
