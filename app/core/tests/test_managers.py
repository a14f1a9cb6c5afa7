"""
Tests for SoftDeleteManager and SoftDeleteQuerySet in core/managers.py.

This module tests:
- Default manager hides soft-deleted rows
- with_deleted() manager method
- QuerySet delete() and hard_delete()
"""

import pytest

from chat.models import Chat
from chat.tests.factories import ChatFactory


@pytest.fixture
def chats(db):
    """Two active chats and one soft-deleted chat."""
    active = ChatFactory.create_batch(2)
    deleted = ChatFactory()
    deleted.soft_delete()
    return active, deleted


@pytest.mark.django_db
class TestSoftDeleteManagerFiltering:
    def test_objects_excludes_deleted(self, chats):
        """
        Default manager should hide soft-deleted rows.

        Why it matters: Every lookup in the services relies on it.
        """
        active, deleted = chats

        assert set(Chat.objects.all()) == set(active)
        assert not Chat.objects.filter(pk=deleted.pk).exists()

    def test_objects_get_raises_for_deleted(self, chats):
        _, deleted = chats

        with pytest.raises(Chat.DoesNotExist):
            Chat.objects.get(pk=deleted.pk)

    def test_all_objects_includes_deleted(self, chats):
        assert Chat.all_objects.count() == 3


@pytest.mark.django_db
class TestSoftDeleteManagerMethods:
    def test_with_deleted_returns_everything(self, chats):
        assert Chat.objects.with_deleted().count() == 3


@pytest.mark.django_db
class TestSoftDeleteQuerySet:
    def test_delete_soft_deletes_each_row(self, chats):
        """
        QuerySet.delete() goes through soft_delete().

        Why it matters: Bulk deletes must never remove rows.
        """
        active, _ = chats

        count, per_model = Chat.objects.filter(pk__in=[c.pk for c in active]).delete()

        assert count == 2
        assert per_model == {"chat.Chat": 2}
        assert Chat.objects.count() == 0
        assert Chat.all_objects.filter(deleted_at__isnull=False).count() == 3

    def test_hard_delete_removes_rows(self, chats):
        _, deleted = chats

        Chat.objects.with_deleted().filter(pk=deleted.pk).hard_delete()

        assert Chat.all_objects.count() == 2

