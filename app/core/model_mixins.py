"""
Model mixins providing reusable functionality for Django models.

Abstract mixin classes combined with BaseModel to add identity and
lifecycle behaviour shared by the domain apps.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key
    SoftDeleteMixin: Soft delete support (is_deleted, deleted_at)

Usage:
    from core.models import BaseModel
    from core.model_mixins import SoftDeleteMixin, UUIDPrimaryKeyMixin

    class Chat(UUIDPrimaryKeyMixin, SoftDeleteMixin, BaseModel):
        title = models.CharField(max_length=100)

Note:
    - Always list mixins before BaseModel in inheritance
    - SoftDeleteMixin requires SoftDeleteManager (see core.managers)
"""

from __future__ import annotations

import uuid

from django.db import models
from django.utils import timezone


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    IDs travel through GraphQL as opaque strings and are embedded in
    pub/sub topic names, so they must not reveal ordering or row counts.

    Fields:
        id: UUIDField as primary key (auto-generated)
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True


class SoftDeleteMixin(models.Model):
    """
    Soft delete support for models.

    Instead of permanently deleting records, marks them as deleted.
    Deleted records can be restored and keep their identity, which is what
    lets a chat membership be recovered on rejoin instead of duplicated.

    Fields:
        is_deleted: Boolean flag indicating soft delete status
        deleted_at: Timestamp when the record was soft deleted

    Hooks:
        on_soft_delete(): called before the flag is persisted
        on_restore(): called before the flag is cleared

    Subclasses may override the hooks and list extra fields to persist in
    ``soft_delete_update_fields``.

    Usage:
        class Chat(SoftDeleteMixin, BaseModel):
            objects = SoftDeleteManager()
            all_objects = models.Manager()

        chat.soft_delete()
        chat.restore()
        Chat.objects.with_deleted().filter(...)
    """

    is_deleted = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether this record has been soft deleted",
    )
    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp when this record was soft deleted",
    )

    soft_delete_update_fields: tuple[str, ...] = ()

    class Meta:
        abstract = True

    def on_soft_delete(self) -> None:
        """Hook run before the record is marked deleted."""

    def on_restore(self) -> None:
        """Hook run before the record is restored."""

    def _lifecycle_update_fields(self) -> list[str]:
        fields = ["is_deleted", "deleted_at", *self.soft_delete_update_fields]
        if any(f.name == "updated_at" for f in self._meta.concrete_fields):
            fields.append("updated_at")
        return fields

    def soft_delete(self) -> None:
        """
        Mark this record as deleted.

        Sets is_deleted=True and deleted_at to current time. Calling it on an
        already deleted record is a no-op and keeps the original deleted_at.
        """
        if self.is_deleted:
            return

        self.on_soft_delete()
        self.is_deleted = True
        self.deleted_at = timezone.now()
        self.save(update_fields=self._lifecycle_update_fields())

    def restore(self) -> None:
        """
        Restore a soft-deleted record.

        Sets is_deleted=False and deleted_at to None. No-op on active records.
        """
        if not self.is_deleted:
            return

        self.on_restore()
        self.is_deleted = False
        self.deleted_at = None
        self.save(update_fields=self._lifecycle_update_fields())

    def hard_delete(self) -> None:
        """
        Permanently delete this record.

        Warning:
            This cannot be undone. Consider soft_delete() instead.
        """
        super().delete()
