"""
Chat system models.

Models:
    Chat: A conversation users can join and leave
    ChatUser: Membership of a user in a chat, with a last-seen watermark
    Message: Individual message within a chat

Design Decisions:
    - One ChatUser row per (chat, user) for the lifetime of the pair. Leaving
      soft-deletes the row and sets the LEAVED status bit; rejoining restores
      the same row instead of inserting a new one.
    - ChatUser.last_seen only moves forward (enforced in the service layer).
    - Memberships and messages are listed with keyset cursors on
      (created_at, <id>), so both carry a composite index.
"""

from __future__ import annotations

import enum

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.managers import SoftDeleteManager
from core.model_mixins import SoftDeleteMixin, UUIDPrimaryKeyMixin
from core.models import BaseModel


class ChatUserStatus(enum.IntFlag):
    """
    Bit flags stored in ChatUser.status.

    ACTIVE: no flags set
    LEAVED: the user left the chat (mirrors the soft-delete state)
    """

    ACTIVE = 0
    LEAVED = 1 << 0


class Chat(UUIDPrimaryKeyMixin, SoftDeleteMixin, BaseModel):
    """
    A conversation between users.

    Fields:
        title: Display title
        created_by: User who created the chat (null if that account is gone)

    Relationships:
        chat_users: All membership rows, including leaved ones
        messages: All messages
    """

    title = models.CharField(
        max_length=100,
        help_text="Title of the chat",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_chats",
        help_text="User who created this chat",
    )

    objects = SoftDeleteManager()
    all_objects = models.Manager()

    class Meta:
        db_table = "chat_chat"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Chat: {self.title}"


class ChatUser(UUIDPrimaryKeyMixin, SoftDeleteMixin, BaseModel):
    """
    Membership record joining a User and a Chat.

    Membership Lifecycle:
        1. User joins: row created, status ACTIVE, last_seen = now
        2. User leaves: row soft-deleted, LEAVED bit set
        3. User rejoins: same row restored, LEAVED bit cleared,
           last_seen reset to now

    Fields:
        chat: Chat this membership belongs to
        user: Member
        status: ChatUserStatus bit flags
        last_seen: Read watermark; messages created after it are unread

    Constraints:
        - UniqueConstraint(chat, user) over all rows, including leaved ones,
          so concurrent joins cannot create duplicates
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="chat_users",
        help_text="Chat this membership belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_memberships",
        help_text="Member user",
    )

    status = models.PositiveSmallIntegerField(
        default=ChatUserStatus.ACTIVE.value,
        help_text="Membership status bit flags (1 = leaved)",
    )

    last_seen = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Creation time of the newest message the user has seen",
    )

    soft_delete_update_fields = ("status",)

    objects = SoftDeleteManager()
    all_objects = models.Manager()

    class Meta:
        db_table = "chat_chat_user"
        ordering = ["created_at", "user_id"]
        indexes = [
            # Member listing (keyset cursor)
            models.Index(
                fields=["chat", "created_at", "user"],
                name="chat_user_chat_cursor_idx",
            ),
            # User's active chats
            models.Index(
                fields=["user", "-created_at"],
                name="chat_user_user_active_idx",
                condition=Q(is_deleted=False),
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["chat", "user"],
                name="unique_chat_user",
            ),
        ]

    def __str__(self) -> str:
        state = "leaved" if self.is_leaved else "active"
        return f"ChatUser: {self.user_id} in {self.chat_id} [{state}]"

    @property
    def is_leaved(self) -> bool:
        return bool(self.status & ChatUserStatus.LEAVED)

    def on_soft_delete(self) -> None:
        self.status = self.status | ChatUserStatus.LEAVED

    def on_restore(self) -> None:
        self.status = self.status & ~ChatUserStatus.LEAVED


class Message(UUIDPrimaryKeyMixin, BaseModel):
    """
    A message within a chat.

    Fields:
        chat: Chat this message belongs to
        sender: Author (null if the account was removed)
        content: Message text
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Chat this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_messages",
        help_text="User who sent this message",
    )

    content = models.TextField(
        help_text="Message text",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            # Messages in a chat (keyset cursor, unread counts)
            models.Index(
                fields=["chat", "created_at", "id"],
                name="chat_msg_chat_cursor_idx",
            ),
        ]

    def __str__(self) -> str:
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"{self.sender_id or 'Unknown'}: {preview}"
