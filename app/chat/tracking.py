"""
Client-side last-seen tracking.

A chat client renders messages and reports the newest one the user has
actually looked at through the changeLastSeen mutation. LastSeenTracker
holds the decision rule so any Python client (or a test harness driving
the API) reports each advance once:

    1. When a message is rendered, watch() tells whether it can advance the
       chat's marker at all. Messages at or before the marker are not
       observed.
    2. When an observed message becomes visible, on_visible() checks again,
       since other messages may have advanced the marker in the meantime,
       then calls change_last_seen and moves the local marker forward.

Usage:
    tracker = LastSeenTracker(
        change_last_seen=lambda chat_id, last_seen: client.execute(
            CHANGE_LAST_SEEN, {"chatId": chat_id, "lastSeen": last_seen.isoformat()}
        ),
        last_seen={chat["id"]: chat["lastSeen"] for chat in chats},
    )

    message = TrackedMessage.from_payload(payload)
    if tracker.watch(message):
        observer.observe(message, tracker.on_visible)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, NamedTuple

from django.utils.dateparse import parse_datetime

logger = logging.getLogger(__name__)


def _as_datetime(value: datetime | str | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    parsed = parse_datetime(value)
    if parsed is None:
        raise ValueError(f"Invalid datetime: {value!r}")
    return parsed


class TrackedMessage(NamedTuple):
    """The parts of a message the tracker needs."""

    chat_id: str
    created_at: datetime

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TrackedMessage:
        """
        Build from a GraphQL message payload.

        Expects {"chat": {"id": ...}, "createdAt": "<ISO 8601>"}.
        """
        return cls(
            chat_id=str(payload["chat"]["id"]),
            created_at=_as_datetime(payload["createdAt"]),
        )


class LastSeenTracker:
    """
    Per-chat cache of last-seen markers plus the renew rule.

    Args:
        change_last_seen: Called as change_last_seen(chat_id, last_seen) when
            the marker should advance on the server
        last_seen: Initial markers keyed by chat id (datetimes or ISO strings)
    """

    def __init__(
        self,
        change_last_seen: Callable[[str, datetime], Any],
        last_seen: Mapping[str, datetime | str | None] | None = None,
    ):
        self.change_last_seen = change_last_seen
        self._last_seen: dict[str, datetime | None] = {
            str(chat_id): _as_datetime(value)
            for chat_id, value in (last_seen or {}).items()
        }

    def get(self, chat_id: str) -> datetime | None:
        return self._last_seen.get(str(chat_id))

    def should_renew(self, chat_id: str, created_at: datetime) -> bool:
        """True if ``created_at`` is newer than the cached marker (or none is cached)."""
        current = self.get(chat_id)
        return current is None or created_at > current

    def update(self, chat_id: str, created_at: datetime) -> bool:
        """
        Move the cached marker forward.

        Returns:
            False if ``created_at`` would not advance the marker
        """
        if not self.should_renew(chat_id, created_at):
            return False
        self._last_seen[str(chat_id)] = created_at
        return True

    def watch(self, message: TrackedMessage) -> bool:
        """Whether a rendered message needs visibility observation."""
        return self.should_renew(message.chat_id, message.created_at)

    def on_visible(self, message: TrackedMessage, visible: bool) -> bool:
        """
        Handle a visibility change of an observed message.

        Returns:
            True if change_last_seen was called
        """
        if not visible:
            return False

        if not self.should_renew(message.chat_id, message.created_at):
            return False

        self.change_last_seen(message.chat_id, message.created_at)
        self.update(message.chat_id, message.created_at)

        logger.debug(
            f"Last seen of chat {message.chat_id} advanced to "
            f"{message.created_at.isoformat()}"
        )
        return True
