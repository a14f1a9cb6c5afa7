"""
GraphQL operations for chats, memberships and messages.

Queries:
    chat(id), chats
    chatUser(userId, chatId), chatUsers(chatId, count, lastUserId, lastCreatedAt)
    messages(chatId, count, lastMessageId, lastCreatedAt)

Mutations:
    createChat(title), joinChat(chatId), leaveChat(chatId),
    changeLastSeen(chatId, lastSeen), sendMessage(chatId, content)

Subscriptions (WebSocket only):
    lastSeenChanged(userId), chatJoined(userId), chatLeaved(userId),
    chatUserJoined(chatId), chatUserLeaved(chatId), chatUserUpdated(chatId),
    messageCreated(chatId)

Resolvers are thin: they take the caller from the context and delegate to
the services through sync_to_async. Service errors carry GraphQL extensions
({"code": <status>, "error_code": ...}).
"""

from collections.abc import AsyncGenerator
from datetime import datetime
from typing import Optional

import strawberry
from asgiref.sync import sync_to_async
from strawberry.types import Info

from chat.constants import PAGINATION_CONFIG
from chat.pubsub import SubscriptionType, subscribe
from chat.services import ChatService, ChatUserService, MessageService
from chat.types import (
    ChatType,
    ChatUsersResult,
    ChatUserType,
    MessagesResult,
    MessageType,
)
from core.exceptions import ValidationError
from core.graphql import IsAuthenticated, get_current_user
from core.helpers import parse_uuid


def _get_ws(info: Info):
    ws = getattr(info.context, "ws", None)
    if ws is None:
        raise ValidationError(
            "Subscriptions require a WebSocket connection",
            error_code="WEBSOCKET_REQUIRED",
        )
    return ws


@strawberry.type
class Query:
    @strawberry.field(permission_classes=[IsAuthenticated])
    async def chat(self, info: Info, id: strawberry.ID) -> Optional[ChatType]:
        return await sync_to_async(ChatService.get_chat)(id)

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def chats(self, info: Info) -> list[ChatType]:
        user = get_current_user(info)
        return await sync_to_async(ChatService.list_user_chats)(user)

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def chat_user(
        self, info: Info, user_id: strawberry.ID, chat_id: strawberry.ID
    ) -> Optional[ChatUserType]:
        return await sync_to_async(ChatUserService.get_chat_user)(user_id, chat_id)

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def chat_users(
        self,
        info: Info,
        chat_id: strawberry.ID,
        count: int = PAGINATION_CONFIG.DEFAULT_PAGE_SIZE,
        last_user_id: Optional[strawberry.ID] = None,
        last_created_at: Optional[datetime] = None,
    ) -> ChatUsersResult:
        page = await sync_to_async(ChatUserService.list_chat_users)(
            chat_id, count, last_user_id, last_created_at
        )
        return ChatUsersResult(chat_users=page.items, has_more=page.has_more)

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def messages(
        self,
        info: Info,
        chat_id: strawberry.ID,
        count: int = PAGINATION_CONFIG.DEFAULT_PAGE_SIZE,
        last_message_id: Optional[strawberry.ID] = None,
        last_created_at: Optional[datetime] = None,
    ) -> MessagesResult:
        user = get_current_user(info)
        page = await sync_to_async(MessageService.list_messages)(
            user, chat_id, count, last_message_id, last_created_at
        )
        return MessagesResult(messages=page.items, has_more=page.has_more)


@strawberry.type
class Mutation:
    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def create_chat(self, info: Info, title: str) -> ChatType:
        user = get_current_user(info)
        return await sync_to_async(ChatService.create_chat)(user, title)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def join_chat(self, info: Info, chat_id: strawberry.ID) -> ChatUserType:
        user = get_current_user(info)
        return await sync_to_async(ChatUserService.join_chat)(user, chat_id)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def leave_chat(self, info: Info, chat_id: strawberry.ID) -> bool:
        user = get_current_user(info)
        return await sync_to_async(ChatUserService.leave_chat)(user, chat_id)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def change_last_seen(
        self, info: Info, chat_id: strawberry.ID, last_seen: datetime
    ) -> bool:
        user = get_current_user(info)
        return await sync_to_async(ChatUserService.change_last_seen)(
            user, chat_id, last_seen
        )

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def send_message(
        self, info: Info, chat_id: strawberry.ID, content: str
    ) -> MessageType:
        user = get_current_user(info)
        return await sync_to_async(MessageService.send_message)(user, chat_id, content)


@strawberry.type
class Subscription:
    @strawberry.subscription
    async def last_seen_changed(
        self, info: Info, user_id: strawberry.ID
    ) -> AsyncGenerator[ChatUserType, None]:
        user_id = parse_uuid(user_id, field="user_id")
        async for chat_user in subscribe(
            _get_ws(info), SubscriptionType.CHANGE_LAST_SEEN, user_id
        ):
            yield chat_user

    @strawberry.subscription
    async def chat_joined(
        self, info: Info, user_id: strawberry.ID
    ) -> AsyncGenerator[ChatType, None]:
        user_id = parse_uuid(user_id, field="user_id")
        async for chat in subscribe(_get_ws(info), SubscriptionType.CHAT_JOINED, user_id):
            yield chat

    @strawberry.subscription
    async def chat_leaved(
        self, info: Info, user_id: strawberry.ID
    ) -> AsyncGenerator[ChatType, None]:
        user_id = parse_uuid(user_id, field="user_id")
        async for chat in subscribe(_get_ws(info), SubscriptionType.CHAT_LEAVED, user_id):
            yield chat

    @strawberry.subscription
    async def chat_user_joined(
        self, info: Info, chat_id: strawberry.ID
    ) -> AsyncGenerator[ChatUserType, None]:
        chat_id = parse_uuid(chat_id, field="chat_id")
        async for chat_user in subscribe(
            _get_ws(info), SubscriptionType.CHAT_USER_JOINED, chat_id
        ):
            yield chat_user

    @strawberry.subscription
    async def chat_user_leaved(
        self, info: Info, chat_id: strawberry.ID
    ) -> AsyncGenerator[ChatUserType, None]:
        chat_id = parse_uuid(chat_id, field="chat_id")
        async for chat_user in subscribe(
            _get_ws(info), SubscriptionType.CHAT_USER_LEAVED, chat_id
        ):
            yield chat_user

    @strawberry.subscription
    async def chat_user_updated(
        self, info: Info, chat_id: strawberry.ID
    ) -> AsyncGenerator[ChatUserType, None]:
        chat_id = parse_uuid(chat_id, field="chat_id")
        async for chat_user in subscribe(
            _get_ws(info), SubscriptionType.CHAT_USER_UPDATED, chat_id
        ):
            yield chat_user

    @strawberry.subscription
    async def message_created(
        self, info: Info, chat_id: strawberry.ID
    ) -> AsyncGenerator[MessageType, None]:
        chat_id = parse_uuid(chat_id, field="chat_id")
        async for message in subscribe(
            _get_ws(info), SubscriptionType.MESSAGE_CREATED, chat_id
        ):
            yield message
