"""
Chat application configuration.

This app provides the chat system with:
- Chats users can join, leave and rejoin
- Per-member last-seen tracking and unread counts
- GraphQL queries, mutations and subscriptions
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"

    def ready(self):
        """Connect the profile_updated receiver."""
        from chat import signals  # noqa: F401
