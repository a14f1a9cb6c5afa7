"""
Pub/sub bus for GraphQL subscriptions.

Events travel over the Django Channels channel layer. Each event is sent to
a group named ``<EVENT>_<id>`` (the topic), e.g. ``CHAT_USER_JOINED_<chat id>``
or ``CHANGE_LAST_SEEN_<user id>``. Subscribers add their WebSocket channel to
the topic group and receive every event published to it.

Only a reference to the affected row travels over the layer (model label and
primary key); subscribers reload the row when the event arrives, including
soft-deleted rows, so "leaved" events still resolve.

Related files:
    - services.py: Publishes after each state change
    - schema.py: Subscription resolvers built on subscribe()
    - config/graphql.py: WebSocket consumer providing listen_to_channel()

Message format (channel layer):
    {
        "type": "pubsub.event",
        "topic": "CHAT_USER_JOINED_<uuid>",
        "model": "chat.chatuser",
        "pk": "<uuid>",
    }
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from asgiref.sync import async_to_sync, sync_to_async
from channels.layers import get_channel_layer
from django.apps import apps

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from typing import Any

    from django.db import models

logger = logging.getLogger(__name__)

EVENT_MESSAGE_TYPE = "pubsub.event"


class SubscriptionType:
    """Event names used as topic prefixes."""

    CHAT_JOINED = "CHAT_JOINED"
    CHAT_LEAVED = "CHAT_LEAVED"
    CHAT_USER_JOINED = "CHAT_USER_JOINED"
    CHAT_USER_LEAVED = "CHAT_USER_LEAVED"
    CHAT_USER_UPDATED = "CHAT_USER_UPDATED"
    CHANGE_LAST_SEEN = "CHANGE_LAST_SEEN"
    MESSAGE_CREATED = "MESSAGE_CREATED"


def topic(event: str, object_id: Any) -> str:
    """
    Build the topic (channel layer group name) for an event.

    Example:
        topic(SubscriptionType.CHAT_USER_JOINED, chat.id)
        # "CHAT_USER_JOINED_1b4e28ba-2fa1-11d2-883f-0016d3cca427"
    """
    return f"{event}_{object_id}"


def build_event(event: str, object_id: Any, instance: models.Model) -> dict[str, str]:
    """Channel layer message carrying a reference to ``instance``."""
    return {
        "type": EVENT_MESSAGE_TYPE,
        "topic": topic(event, object_id),
        "model": instance._meta.label_lower,
        "pk": str(instance.pk),
    }


async def apublish(event: str, object_id: Any, instance: models.Model) -> None:
    """Publish an event from async code."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning(f"No channel layer configured, dropping {event} event")
        return

    message = build_event(event, object_id, instance)
    await channel_layer.group_send(message["topic"], message)
    logger.debug(f"Published {message['model']} {message['pk']} to {message['topic']}")


def publish(event: str, object_id: Any, instance: models.Model) -> None:
    """
    Publish an event from sync code (services).

    Call after the database write has completed so subscribers that reload
    the row see the new state.
    """
    async_to_sync(apublish)(event, object_id, instance)


def load_instance(message: dict[str, Any]) -> models.Model | None:
    """
    Reload the row referenced by an event.

    Uses the model's base manager so soft-deleted rows are found too.
    """
    model = apps.get_model(message["model"])
    return model._base_manager.filter(pk=message["pk"]).first()


async def subscribe(ws: Any, event: str, object_id: Any) -> AsyncGenerator[Any, None]:
    """
    Yield the rows published to ``<event>_<object_id>`` until the client
    unsubscribes.

    Args:
        ws: Channels consumer providing listen_to_channel() (the GraphQL
            WebSocket consumer)
        event: SubscriptionType value
        object_id: Id the topic is keyed on (user or chat id)

    Note:
        One connection may hold several subscriptions; all of them receive
        messages of the same channel-layer type, so messages for other topics
        are skipped here.
    """
    group = topic(event, object_id)

    async with ws.listen_to_channel(EVENT_MESSAGE_TYPE, groups=[group]) as listener:
        async for message in listener:
            if message.get("topic") != group:
                continue

            instance = await sync_to_async(load_instance)(message)
            if instance is None:
                logger.debug(f"Dropping {group} event, {message['pk']} no longer exists")
                continue

            yield instance
