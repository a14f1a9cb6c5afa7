"""
GraphQL types for the chat app.

Types:
    ChatType: A chat
    ChatUserType: A membership, with its chat, user and unread count
    MessageType: A message
    ChatUsersResult / MessagesResult: Keyset pages

Resolvers receive the model instance as ``self``. Related chats and users
are loaded including soft-deleted rows, so events about leaved members and
deleted accounts still resolve.
"""

from datetime import datetime
from typing import Optional

import strawberry
from asgiref.sync import sync_to_async

from authentication.models import User
from authentication.types import UserType
from chat.models import Chat
from chat.services import ChatUserService


def _load_user(user_id) -> Optional[User]:
    if user_id is None:
        return None
    return User.objects.filter(id=user_id).first()


def _load_chat(chat_id) -> Optional[Chat]:
    return Chat.all_objects.filter(id=chat_id).first()


@strawberry.type(name="Chat")
class ChatType:
    id: strawberry.ID
    title: str
    created_at: datetime
    is_deleted: bool

    @strawberry.field
    async def created_by(self) -> Optional[UserType]:
        return await sync_to_async(_load_user)(self.created_by_id)


@strawberry.type(name="ChatUser")
class ChatUserType:
    id: strawberry.ID
    chat_id: strawberry.ID
    user_id: strawberry.ID
    status: int
    is_leaved: bool
    last_seen: Optional[datetime]
    created_at: datetime

    @strawberry.field
    async def chat(self) -> ChatType:
        return await sync_to_async(_load_chat)(self.chat_id)

    @strawberry.field
    async def user(self) -> UserType:
        return await sync_to_async(_load_user)(self.user_id)

    @strawberry.field(description="Messages from other members after lastSeen")
    async def unread_count(self) -> int:
        return await sync_to_async(ChatUserService.unread_count)(self)


@strawberry.type(name="Message")
class MessageType:
    id: strawberry.ID
    chat_id: strawberry.ID
    sender_id: Optional[strawberry.ID]
    content: str
    created_at: datetime

    @strawberry.field
    async def chat(self) -> ChatType:
        return await sync_to_async(_load_chat)(self.chat_id)

    @strawberry.field
    async def sender(self) -> Optional[UserType]:
        return await sync_to_async(_load_user)(self.sender_id)


@strawberry.type
class ChatUsersResult:
    chat_users: list[ChatUserType]
    has_more: bool


@strawberry.type
class MessagesResult:
    messages: list[MessageType]
    has_more: bool
