"""
Tests for the chat GraphQL operations.

These go through the root schema (``graphql`` fixture) to check argument
names, camelCase fields, null results and the coded errors clients branch on.
Business rules themselves are covered in test_services.py.
"""

import uuid
from datetime import timedelta
from types import SimpleNamespace

import pytest
from asgiref.sync import async_to_sync
from channels.testing import WebsocketCommunicator
from django.utils import timezone
from freezegun import freeze_time

from authentication.jwt import issue_tokens
from chat.models import ChatUser
from chat.schema import _get_ws
from chat.tests.factories import ChatFactory, ChatUserFactory, MessageFactory
from core.exceptions import ValidationError
from core.graphql import GraphQLContext

JOIN_CHAT = """
mutation JoinChat($chatId: ID!) {
    joinChat(chatId: $chatId) { id chatId userId status isLeaved lastSeen }
}
"""

LEAVE_CHAT = "mutation ($chatId: ID!) { leaveChat(chatId: $chatId) }"

CHANGE_LAST_SEEN = """
mutation ($chatId: ID!, $lastSeen: DateTime!) {
    changeLastSeen(chatId: $chatId, lastSeen: $lastSeen)
}
"""

CHAT_USERS = """
query ChatUsers($chatId: ID!, $count: Int!, $lastUserId: ID, $lastCreatedAt: DateTime) {
    chatUsers(
        chatId: $chatId
        count: $count
        lastUserId: $lastUserId
        lastCreatedAt: $lastCreatedAt
    ) {
        chatUsers { userId createdAt user { name } }
        hasMore
    }
}
"""


@pytest.mark.django_db
class TestJoinChatMutation:
    def test_returns_membership(self, graphql, chat, member, published):
        result = graphql(JOIN_CHAT, {"chatId": str(chat.id)}, user=member)

        assert result.errors is None
        payload = result.data["joinChat"]
        assert payload["chatId"] == str(chat.id)
        assert payload["userId"] == str(member.id)
        assert payload["status"] == 0
        assert payload["isLeaved"] is False
        assert payload["lastSeen"] is not None

    def test_join_twice_is_409(self, graphql, chat, member, published, error_codes):
        graphql(JOIN_CHAT, {"chatId": str(chat.id)}, user=member)

        result = graphql(JOIN_CHAT, {"chatId": str(chat.id)}, user=member)

        assert result.data is None
        assert error_codes(result) == [(409, "ALREADY_JOINED")]

    def test_unknown_chat_is_404(self, graphql, member, published, error_codes):
        result = graphql(JOIN_CHAT, {"chatId": str(uuid.uuid4())}, user=member)

        assert error_codes(result) == [(404, "CHAT_NOT_FOUND")]

    def test_anonymous_is_401(self, graphql, chat, published, error_codes):
        result = graphql(JOIN_CHAT, {"chatId": str(chat.id)})

        assert error_codes(result) == [(401, "UNAUTHENTICATED")]
        assert published.events == []


@pytest.mark.django_db
class TestLeaveChatMutation:
    def test_leave_then_rejoin(self, graphql, chat, member, membership, published):
        """
        A member can leave and come back through the API.

        Why it matters: The full ACTIVE -> LEAVED -> ACTIVE cycle.
        """
        left = graphql(LEAVE_CHAT, {"chatId": str(chat.id)}, user=member)
        rejoined = graphql(JOIN_CHAT, {"chatId": str(chat.id)}, user=member)

        assert left.data == {"leaveChat": True}
        assert rejoined.data["joinChat"]["id"] == str(membership.id)
        assert rejoined.data["joinChat"]["isLeaved"] is False

    def test_never_joined_is_404(self, graphql, chat, outsider, published, error_codes):
        result = graphql(LEAVE_CHAT, {"chatId": str(chat.id)}, user=outsider)

        assert error_codes(result) == [(404, "CHAT_USER_NOT_FOUND")]


@pytest.mark.django_db
class TestChangeLastSeenMutation:
    def test_true_only_when_advanced(self, graphql, chat, member, membership, published):
        newer = (membership.last_seen + timedelta(seconds=1)).isoformat()

        first = graphql(
            CHANGE_LAST_SEEN, {"chatId": str(chat.id), "lastSeen": newer}, user=member
        )
        second = graphql(
            CHANGE_LAST_SEEN, {"chatId": str(chat.id), "lastSeen": newer}, user=member
        )

        assert first.data == {"changeLastSeen": True}
        assert second.data == {"changeLastSeen": False}
        assert len(published.events) == 1


@pytest.mark.django_db
class TestChatUsersQuery:
    def test_pages_with_has_more(self, graphql, chat, member):
        with freeze_time("2024-01-01 09:00:00"):
            ChatUserFactory.create_batch(3, chat=chat)

        first = graphql(CHAT_USERS, {"chatId": str(chat.id), "count": 2}, user=member)
        page = first.data["chatUsers"]
        last = page["chatUsers"][-1]
        second = graphql(
            CHAT_USERS,
            {
                "chatId": str(chat.id),
                "count": 2,
                "lastUserId": last["userId"],
                "lastCreatedAt": last["createdAt"],
            },
            user=member,
        )

        assert first.errors is None
        assert len(page["chatUsers"]) == 2
        assert page["hasMore"] is True
        assert len(second.data["chatUsers"]["chatUsers"]) == 1
        assert second.data["chatUsers"]["hasMore"] is False

    def test_zero_count_is_400(self, graphql, chat, member, error_codes):
        result = graphql(CHAT_USERS, {"chatId": str(chat.id), "count": 0}, user=member)

        assert error_codes(result) == [(400, "INVALID_COUNT")]


@pytest.mark.django_db
class TestChatUserQuery:
    QUERY = """
    query ($userId: ID!, $chatId: ID!) {
        chatUser(userId: $userId, chatId: $chatId) {
            lastSeen
            unreadCount
            chat { title }
        }
    }
    """

    def test_returns_membership_with_unread_count(self, graphql, chat, member, membership):
        with freeze_time(membership.last_seen + timedelta(minutes=1)):
            MessageFactory.create_batch(2, chat=chat)

        result = graphql(
            self.QUERY, {"userId": str(member.id), "chatId": str(chat.id)}, user=member
        )

        assert result.errors is None
        assert result.data["chatUser"]["unreadCount"] == 2
        assert result.data["chatUser"]["chat"] == {"title": "General"}

    def test_leaved_membership_is_null(self, graphql, chat, member, membership):
        membership.soft_delete()

        result = graphql(
            self.QUERY, {"userId": str(member.id), "chatId": str(chat.id)}, user=member
        )

        assert result.errors is None
        assert result.data == {"chatUser": None}


@pytest.mark.django_db
class TestChatsAndMessages:
    def test_create_chat_then_list(self, graphql, owner, published):
        created = graphql(
            'mutation { createChat(title: "Design") { id title createdBy { name } } }',
            user=owner,
        )
        listed = graphql("{ chats { id title } }", user=owner)

        assert created.data["createChat"]["createdBy"] == {"name": "Owner"}
        assert listed.data["chats"] == [
            {"id": created.data["createChat"]["id"], "title": "Design"}
        ]
        assert ChatUser.objects.filter(user=owner).count() == 1

    def test_send_message_requires_membership(
        self, graphql, chat, outsider, published, error_codes
    ):
        result = graphql(
            'mutation ($chatId: ID!) { sendMessage(chatId: $chatId, content: "hi") { id } }',
            {"chatId": str(chat.id)},
            user=outsider,
        )

        assert error_codes(result) == [(403, "NOT_MEMBER")]

    def test_sent_message_is_listed(self, graphql, chat, member, membership, published):
        graphql(
            'mutation ($chatId: ID!) { sendMessage(chatId: $chatId, content: "hi") { id } }',
            {"chatId": str(chat.id)},
            user=member,
        )

        result = graphql(
            """
            query ($chatId: ID!) {
                messages(chatId: $chatId, count: -1) {
                    messages { content sender { name } }
                    hasMore
                }
            }
            """,
            {"chatId": str(chat.id)},
            user=member,
        )

        assert result.data["messages"] == {
            "messages": [{"content": "hi", "sender": {"name": "Member"}}],
            "hasMore": False,
        }


class TestSubscriptionTransport:
    def test_subscriptions_need_a_websocket(self):
        info = SimpleNamespace(context=GraphQLContext())

        with pytest.raises(ValidationError) as exc_info:
            _get_ws(info)

        assert exc_info.value.error_code == "WEBSOCKET_REQUIRED"

    def test_websocket_consumer_is_returned(self):
        ws = object()

        assert _get_ws(SimpleNamespace(context=GraphQLContext(ws=ws))) is ws


SUBSCRIPTIONS = {
    "joined": "subscription ($id: ID!) { chatUserJoined(chatId: $id) { userId isLeaved } }",
    "other": "subscription ($id: ID!) { chatUserJoined(chatId: $id) { userId } }",
    "seen": "subscription ($id: ID!) { lastSeenChanged(userId: $id) { chatId lastSeen } }",
    "left": "subscription ($id: ID!) { chatUserLeaved(chatId: $id) { userId isLeaved } }",
}


class GraphQLSocket:
    """graphql-transport-ws client over a Channels test communicator."""

    def __init__(self, access_token):
        from config.asgi import application

        self.communicator = WebsocketCommunicator(
            application,
            f"/graphql/?token={access_token}",
            headers=[(b"origin", b"http://localhost")],
            subprotocols=["graphql-transport-ws"],
        )
        self.frames = []

    async def connect(self):
        connected, _ = await self.communicator.connect()
        assert connected
        await self.communicator.send_json_to({"type": "connection_init"})
        assert (await self.communicator.receive_json_from())["type"] == "connection_ack"

    async def start(self, operation_id, query, variables):
        await self.communicator.send_json_to(
            {
                "id": operation_id,
                "type": "subscribe",
                "payload": {"query": query, "variables": variables},
            }
        )

    async def wait_for(self, *operation_ids):
        """Collect ``next`` frames until each operation id has produced one."""
        payloads = {}
        while set(operation_ids) - payloads.keys():
            frame = await self.communicator.receive_json_from(timeout=3)
            assert frame["type"] != "error", frame
            if frame["type"] == "next":
                self.frames.append(frame)
                payloads.setdefault(frame["id"], frame["payload"])
        return payloads

    async def close(self):
        # Frames still in flight (e.g. from other subscriptions) are recorded too.
        while not await self.communicator.receive_nothing(timeout=0.2):
            self.frames.append(await self.communicator.receive_json_from())
        await self.communicator.disconnect()


@pytest.mark.django_db(transaction=True)
class TestSubscriptionsOverWebSocket:
    def test_membership_events_reach_topic_subscribers(self, chat, member):
        """
        Mutations push the changed membership to subscribers of its topic.

        Why it matters: Member lists and read receipts update live, and a
        subscriber to another chat hears nothing.
        """
        other_chat = ChatFactory()
        access = issue_tokens(member)["access"]
        chat_id, member_id = str(chat.id), str(member.id)
        new_last_seen = (timezone.now() + timedelta(hours=1)).isoformat()

        async def scenario():
            socket = GraphQLSocket(access)
            await socket.connect()
            await socket.start("joined", SUBSCRIPTIONS["joined"], {"id": chat_id})
            await socket.start("other", SUBSCRIPTIONS["other"], {"id": str(other_chat.id)})
            await socket.start("seen", SUBSCRIPTIONS["seen"], {"id": member_id})
            await socket.start("left", SUBSCRIPTIONS["left"], {"id": chat_id})
            # Let the subscriptions join their groups before publishing.
            assert await socket.communicator.receive_nothing(timeout=0.3)

            await socket.start("join", JOIN_CHAT, {"chatId": chat_id})
            joined = await socket.wait_for("join", "joined")

            await socket.start(
                "seen-update",
                CHANGE_LAST_SEEN,
                {"chatId": chat_id, "lastSeen": new_last_seen},
            )
            seen = await socket.wait_for("seen-update", "seen")

            await socket.start("leave", LEAVE_CHAT, {"chatId": chat_id})
            left = await socket.wait_for("leave", "left")

            await socket.close()
            return joined, seen, left, socket.frames

        joined, seen, left, frames = async_to_sync(scenario)()

        assert joined["joined"]["data"]["chatUserJoined"] == {
            "userId": member_id,
            "isLeaved": False,
        }
        assert seen["seen-update"]["data"] == {"changeLastSeen": True}
        assert seen["seen"]["data"]["lastSeenChanged"]["chatId"] == chat_id
        assert left["left"]["data"]["chatUserLeaved"] == {
            "userId": member_id,
            "isLeaved": True,
        }
        assert "other" not in {frame["id"] for frame in frames}
