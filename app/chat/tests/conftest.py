"""
Test configuration and fixtures for chat tests.

This module provides:
- User fixtures
- A chat with an active member
- A patched publish() capturing emitted events

Usage:
    def test_example(chat, member, published):
        ChatUserService.leave_chat(member, chat.id)
        assert published.events[0][0] == SubscriptionType.CHAT_USER_LEAVED
"""

from unittest.mock import patch

import pytest

from authentication.tests.factories import UserFactory
from chat.tests.factories import ChatFactory, ChatUserFactory


class PublishedEvents:
    """Records (event, object_id, instance) tuples passed to publish()."""

    def __init__(self):
        self.events = []

    def __call__(self, event, object_id, instance):
        self.events.append((event, object_id, instance))

    @property
    def names(self):
        return [event for event, _, _ in self.events]

    def topics(self):
        return [f"{event}_{object_id}" for event, object_id, _ in self.events]

    def clear(self):
        self.events.clear()


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def owner(db):
    """User who created the test chat."""
    return UserFactory(name="Owner")


@pytest.fixture
def member(db):
    """User with an active membership in the test chat."""
    return UserFactory(name="Member")


@pytest.fixture
def outsider(db):
    """User who has never joined the test chat."""
    return UserFactory(name="Outsider")


# =============================================================================
# Chat Fixtures
# =============================================================================


@pytest.fixture
def chat(owner):
    """Chat created by ``owner`` (no memberships)."""
    return ChatFactory(created_by=owner, title="General")


@pytest.fixture
def membership(chat, member):
    """Active membership of ``member`` in ``chat``."""
    return ChatUserFactory(chat=chat, user=member)


# =============================================================================
# Pub/Sub Fixtures
# =============================================================================


@pytest.fixture
def published():
    """Capture events published by the chat services."""
    recorder = PublishedEvents()
    with patch("chat.services.publish", side_effect=recorder):
        yield recorder
