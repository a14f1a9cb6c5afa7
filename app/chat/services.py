"""
Chat system service layer.

This module provides the business logic for the chat system, encapsulating
all operations on chats, memberships and messages.

Services:
    ChatService: Chat lifecycle and lookups
    ChatUserService: Membership (join, leave, last seen, listing)
    MessageService: Sending and listing messages

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures raise core.exceptions errors with an error_code
    - Unexpected failures propagate unchanged
    - Events are published after the database write has completed, outside
      the transaction

Usage:
    from chat.services import ChatService, ChatUserService, MessageService

    chat = ChatService.create_chat(user, "Project Team")
    chat_user = ChatUserService.join_chat(other_user, chat.id)
    MessageService.send_message(other_user, chat.id, "Hello everyone!")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError
from django.db.models import Q
from django.utils import timezone

from chat.constants import CHAT_CONFIG, MESSAGE_CONFIG
from chat.models import Chat, ChatUser, Message
from chat.pagination import Page, keyset_paginate
from chat.pubsub import SubscriptionType, publish
from core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.helpers import ensure_aware, parse_uuid
from core.services import BaseService

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from authentication.models import User


class ChatService(BaseService):
    """
    Service for chat lifecycle operations.

    Methods:
        get_chat: Point lookup (None if absent or deleted)
        require_chat: Point lookup raising CHAT_NOT_FOUND
        create_chat: Create a chat and join the creator
        list_user_chats: Chats the user is an active member of
    """

    @classmethod
    def get_chat(cls, chat_id: str | UUID) -> Chat | None:
        return Chat.objects.filter(id=parse_uuid(chat_id, field="chat_id")).first()

    @classmethod
    def require_chat(cls, chat_id: str | UUID) -> Chat:
        """
        Get a chat or fail.

        Raises:
            NotFoundError: CHAT_NOT_FOUND
        """
        chat = cls.get_chat(chat_id)
        if chat is None:
            raise NotFoundError(
                "Chat not found",
                error_code="CHAT_NOT_FOUND",
                details={"chat_id": str(chat_id)},
            )
        return chat

    @classmethod
    def create_chat(cls, user: User, title: str) -> Chat:
        """
        Create a chat and make the creator its first member.

        Emits the same events as joining an existing chat.

        Error codes:
            INVALID_TITLE: Title empty or too long after stripping
        """
        title = (title or "").strip()
        if not (
            CHAT_CONFIG.MIN_TITLE_LENGTH <= len(title) <= CHAT_CONFIG.MAX_TITLE_LENGTH
        ):
            raise ValidationError(
                f"Title must be between {CHAT_CONFIG.MIN_TITLE_LENGTH} and "
                f"{CHAT_CONFIG.MAX_TITLE_LENGTH} characters",
                error_code="INVALID_TITLE",
                details={"title": title[:20]},
            )

        with cls.atomic():
            chat = Chat.objects.create(title=title, created_by=user)
            chat_user = ChatUser.objects.create(
                chat=chat,
                user=user,
                last_seen=timezone.now(),
            )

        ChatUserService.publish_joined(chat, chat_user)

        cls.get_logger().info(f"User {user.id} created chat {chat.id}")
        return chat

    @classmethod
    def list_user_chats(cls, user: User) -> list[Chat]:
        """Chats with an active membership for ``user``, newest membership first."""
        memberships = (
            ChatUser.objects.filter(user=user, chat__is_deleted=False)
            .select_related("chat")
            .order_by("-created_at", "-id")
        )
        return [membership.chat for membership in memberships]


class ChatUserService(BaseService):
    """
    Service for chat membership operations.

    Methods:
        get_chat_user: Active membership lookup
        list_chat_users: Keyset-paginated active members of a chat
        join_chat: Join or rejoin a chat
        leave_chat: Leave a chat
        change_last_seen: Advance the caller's read watermark
        unread_count: Messages from others after the watermark
        notify_profile_updated: Fan a profile change out to chat subscribers

    State machine:
        ACTIVE --leave--> LEAVED --join--> ACTIVE
    """

    @classmethod
    def _ensure_owner(cls, chat_user: ChatUser, user: User) -> None:
        if chat_user.user_id != user.id:
            raise PermissionDeniedError("Forbidden", error_code="FORBIDDEN")

    @classmethod
    def publish_joined(cls, chat: Chat, chat_user: ChatUser) -> None:
        publish(SubscriptionType.CHAT_JOINED, chat_user.user_id, chat)
        publish(SubscriptionType.CHAT_USER_JOINED, chat.id, chat_user)

    @classmethod
    def get_chat_user(
        cls, user_id: str | UUID, chat_id: str | UUID
    ) -> ChatUser | None:
        return ChatUser.objects.filter(
            user_id=parse_uuid(user_id, field="user_id"),
            chat_id=parse_uuid(chat_id, field="chat_id"),
        ).first()

    @classmethod
    def require_active_membership(cls, user: User, chat: Chat) -> ChatUser:
        """
        Get the caller's active membership in ``chat``.

        Raises:
            PermissionDeniedError: NOT_MEMBER
        """
        chat_user = ChatUser.objects.filter(chat=chat, user=user).first()
        if chat_user is None:
            raise PermissionDeniedError(
                "You are not a member of this chat",
                error_code="NOT_MEMBER",
                details={"chat_id": str(chat.id)},
            )
        return chat_user

    @classmethod
    def list_chat_users(
        cls,
        chat_id: str | UUID,
        count: int,
        last_user_id: str | UUID | None = None,
        last_created_at: datetime | None = None,
    ) -> Page[ChatUser]:
        """
        List active members ordered by (created_at, user_id).

        Rows strictly after (last_created_at, last_user_id) are returned; the
        cursor is ignored unless both parts are given.

        Raises:
            NotFoundError: CHAT_NOT_FOUND
            ValidationError: INVALID_COUNT, INVALID_ID
        """
        chat = ChatService.require_chat(chat_id)

        if last_user_id is not None:
            last_user_id = parse_uuid(last_user_id, field="last_user_id")
        if last_created_at is not None:
            last_created_at = ensure_aware(last_created_at)

        return keyset_paginate(
            ChatUser.objects.filter(chat=chat),
            count=count,
            tiebreaker="user_id",
            last_created_at=last_created_at,
            last_key=last_user_id,
        )

    @classmethod
    def join_chat(cls, user: User, chat_id: str | UUID) -> ChatUser:
        """
        Join a chat, or rejoin one previously left.

        A first join creates the membership. Rejoining restores the existing
        soft-deleted row and resets last_seen to now.

        Events:
            CHAT_JOINED_<user id> (chat), CHAT_USER_JOINED_<chat id> (membership)

        Raises:
            NotFoundError: CHAT_NOT_FOUND
            PermissionDeniedError: FORBIDDEN
            ConflictError: ALREADY_JOINED
        """
        chat = ChatService.require_chat(chat_id)

        chat_user = (
            ChatUser.objects.with_deleted().filter(chat=chat, user=user).first()
        )

        if chat_user is None:
            try:
                with cls.atomic():
                    chat_user = ChatUser.objects.create(
                        chat=chat,
                        user=user,
                        last_seen=timezone.now(),
                    )
            except IntegrityError:
                # Lost a race with a concurrent join for the same pair.
                raise ConflictError(
                    "User already joined",
                    error_code="ALREADY_JOINED",
                    details={"chat_id": str(chat.id)},
                )
            cls.get_logger().info(f"User {user.id} joined chat {chat.id}")
        else:
            cls._ensure_owner(chat_user, user)

            if not chat_user.is_leaved:
                raise ConflictError(
                    "User already joined",
                    error_code="ALREADY_JOINED",
                    details={"chat_id": str(chat.id)},
                )

            with cls.atomic():
                chat_user.restore()
                chat_user.last_seen = timezone.now()
                chat_user.save(update_fields=["last_seen", "updated_at"])
            cls.get_logger().info(f"User {user.id} rejoined chat {chat.id}")

        cls.publish_joined(chat, chat_user)
        return chat_user

    @classmethod
    def leave_chat(cls, user: User, chat_id: str | UUID) -> bool:
        """
        Leave a chat.

        The membership is soft-deleted and flagged LEAVED; it is restored if
        the user joins again.

        Events:
            CHAT_USER_LEAVED_<chat id> (membership), CHAT_LEAVED_<user id> (chat)

        Raises:
            NotFoundError: CHAT_NOT_FOUND, CHAT_USER_NOT_FOUND
            PermissionDeniedError: FORBIDDEN
            ConflictError: ALREADY_LEAVED
        """
        chat = ChatService.require_chat(chat_id)

        chat_user = (
            ChatUser.objects.with_deleted().filter(chat=chat, user=user).first()
        )
        if chat_user is None:
            raise NotFoundError(
                "Chat user not found",
                error_code="CHAT_USER_NOT_FOUND",
                details={"chat_id": str(chat.id)},
            )

        cls._ensure_owner(chat_user, user)

        if chat_user.is_leaved:
            raise ConflictError(
                "User already leaved",
                error_code="ALREADY_LEAVED",
                details={"chat_id": str(chat.id)},
            )

        with cls.atomic():
            chat_user.soft_delete()

        publish(SubscriptionType.CHAT_USER_LEAVED, chat.id, chat_user)
        publish(SubscriptionType.CHAT_LEAVED, user.id, chat)

        cls.get_logger().info(f"User {user.id} left chat {chat.id}")
        return True

    @classmethod
    def change_last_seen(
        cls, user: User, chat_id: str | UUID, last_seen: datetime
    ) -> bool:
        """
        Advance the caller's last-seen marker in a chat.

        The marker never moves backwards: a value less than or equal to the
        stored one is ignored and False is returned.

        Events:
            CHANGE_LAST_SEEN_<user id> (membership), only when updated

        Raises:
            NotFoundError: CHAT_NOT_FOUND, CHAT_USER_NOT_FOUND
            PermissionDeniedError: FORBIDDEN
        """
        chat = ChatService.require_chat(chat_id)

        chat_user = ChatUser.objects.filter(chat=chat, user=user).first()
        if chat_user is None:
            raise NotFoundError(
                "Chat user not found",
                error_code="CHAT_USER_NOT_FOUND",
                details={"chat_id": str(chat.id)},
            )

        cls._ensure_owner(chat_user, user)

        last_seen = ensure_aware(last_seen)

        # Compare and write in one statement so concurrent calls cannot regress it.
        updated = (
            ChatUser.objects.filter(pk=chat_user.pk)
            .filter(Q(last_seen__isnull=True) | Q(last_seen__lt=last_seen))
            .update(last_seen=last_seen, updated_at=timezone.now())
        )
        if not updated:
            cls.get_logger().debug(
                f"Ignoring last seen {last_seen.isoformat()} for user {user.id} "
                f"in chat {chat.id}, stored value is newer"
            )
            return False

        chat_user.refresh_from_db(fields=["last_seen", "updated_at"])

        publish(SubscriptionType.CHANGE_LAST_SEEN, user.id, chat_user)
        return True

    @classmethod
    def unread_count(cls, chat_user: ChatUser) -> int:
        """Messages from other users created after the membership's last_seen."""
        messages = Message.objects.filter(chat_id=chat_user.chat_id).exclude(
            sender_id=chat_user.user_id
        )
        if chat_user.last_seen is not None:
            messages = messages.filter(created_at__gt=chat_user.last_seen)
        return messages.count()

    @classmethod
    def notify_profile_updated(cls, user: User) -> int:
        """
        Publish CHAT_USER_UPDATED for each of the user's active memberships.

        Returns:
            Number of chats notified
        """
        memberships = list(
            ChatUser.objects.filter(user=user, chat__is_deleted=False)
        )
        for chat_user in memberships:
            publish(SubscriptionType.CHAT_USER_UPDATED, chat_user.chat_id, chat_user)
        return len(memberships)


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        send_message: Send a text message
        list_messages: Keyset-paginated messages of a chat
    """

    @classmethod
    def send_message(cls, user: User, chat_id: str | UUID, content: str) -> Message:
        """
        Send a text message to a chat.

        Events:
            MESSAGE_CREATED_<chat id> (message)

        Raises:
            NotFoundError: CHAT_NOT_FOUND
            PermissionDeniedError: NOT_MEMBER
            ValidationError: EMPTY_CONTENT, CONTENT_TOO_LONG
        """
        chat = ChatService.require_chat(chat_id)
        ChatUserService.require_active_membership(user, chat)

        content = content.strip() if content else ""
        if len(content) < MESSAGE_CONFIG.MIN_CONTENT_LENGTH:
            raise ValidationError(
                "Message content cannot be empty",
                error_code="EMPTY_CONTENT",
            )
        if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
            raise ValidationError(
                f"Message content exceeds {MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
                error_code="CONTENT_TOO_LONG",
                details={"length": len(content)},
            )

        message = Message.objects.create(chat=chat, sender=user, content=content)

        publish(SubscriptionType.MESSAGE_CREATED, chat.id, message)

        cls.get_logger().debug(
            f"User {user.id} sent message {message.id} to chat {chat.id}"
        )
        return message

    @classmethod
    def list_messages(
        cls,
        user: User,
        chat_id: str | UUID,
        count: int,
        last_message_id: str | UUID | None = None,
        last_created_at: datetime | None = None,
    ) -> Page[Message]:
        """
        List messages ordered by (created_at, id), oldest first.

        Same cursor rules as ChatUserService.list_chat_users.

        Raises:
            NotFoundError: CHAT_NOT_FOUND
            PermissionDeniedError: NOT_MEMBER
        """
        chat = ChatService.require_chat(chat_id)
        ChatUserService.require_active_membership(user, chat)

        if last_message_id is not None:
            last_message_id = parse_uuid(last_message_id, field="last_message_id")
        if last_created_at is not None:
            last_created_at = ensure_aware(last_created_at)

        return keyset_paginate(
            Message.objects.filter(chat=chat).select_related("sender"),
            count=count,
            tiebreaker="id",
            last_created_at=last_created_at,
            last_key=last_message_id,
        )
