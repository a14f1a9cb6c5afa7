"""
Chat app for real-time messaging.

This app handles:
- Chats and memberships (join, leave, rejoin)
- Last-seen watermarks and unread counts
- Message sending and history
- Pub/sub events for GraphQL subscriptions

Related apps:
    - authentication: User model for members

Real-time Support:
    Events are published to Django Channels groups (see pubsub.py) and
    delivered by the GraphQL WebSocket consumer (see config/graphql.py).

Usage:
    from chat.services import ChatService, ChatUserService

    chat = ChatService.create_chat(user, "Weekend plans")
    ChatUserService.join_chat(other_user, chat.id)
"""
