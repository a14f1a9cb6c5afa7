"""
Factory Boy factories for chat models.

Provides test data for:
- Chat
- ChatUser: Memberships (active by default)
- Message

Usage:
    from chat.tests.factories import ChatFactory, ChatUserFactory, MessageFactory

    chat = ChatFactory(title="Project Team")
    membership = ChatUserFactory(chat=chat, user=user)
    message = MessageFactory(chat=chat, sender=user)
"""

import factory
from django.utils import timezone

from authentication.tests.factories import UserFactory
from chat.models import Chat, ChatUser, ChatUserStatus, Message


class ChatFactory(factory.django.DjangoModelFactory):
    """
    Factory for Chat model.

    Examples:
        chat = ChatFactory()
        deleted = ChatFactory(is_deleted=True)
    """

    class Meta:
        model = Chat

    title = factory.Sequence(lambda n: f"Chat {n}")
    created_by = factory.SubFactory(UserFactory)


class ChatUserFactory(factory.django.DjangoModelFactory):
    """
    Factory for ChatUser model.

    Examples:
        membership = ChatUserFactory(chat=chat, user=user)
        leaved = ChatUserFactory(leaved=True)
    """

    class Meta:
        model = ChatUser

    class Params:
        leaved = factory.Trait(
            status=ChatUserStatus.LEAVED.value,
            is_deleted=True,
            deleted_at=factory.LazyFunction(timezone.now),
        )

    chat = factory.SubFactory(ChatFactory)
    user = factory.SubFactory(UserFactory)
    status = ChatUserStatus.ACTIVE.value
    last_seen = factory.LazyFunction(timezone.now)


class MessageFactory(factory.django.DjangoModelFactory):
    """Factory for Message model."""

    class Meta:
        model = Message

    chat = factory.SubFactory(ChatFactory)
    sender = factory.SubFactory(UserFactory)
    content = factory.Faker("sentence")
