"""
WebSocket authentication middleware.

Provides JWT authentication for GraphQL subscription connections.
Supports token via query string or subprotocol.

Related files:
    - jwt.py: Token validation
    - config/asgi.py: ASGI configuration

Token Passing Methods:
    1. Query string: ws://host/graphql/?token=<jwt_token>
    2. Subprotocol: Sec-WebSocket-Protocol: jwt, <jwt_token>

Usage in config/asgi.py:
    from authentication.middleware import JWTAuthMiddleware

    application = ProtocolTypeRouter({
        "websocket": JWTAuthMiddleware(
            URLRouter(websocket_urlpatterns)
        ),
    })
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser

from authentication.jwt import get_user_from_token

logger = logging.getLogger(__name__)


class JWTAuthMiddleware(BaseMiddleware):
    """
    JWT authentication middleware for WebSocket connections.

    Extracts JWT token from query string or subprotocol,
    validates it, and attaches the user to the scope.

    Token sources (in order of precedence):
        1. Query string: ?token=<jwt_token>
        2. Subprotocol: Sec-WebSocket-Protocol: jwt, <jwt_token>
    """

    async def __call__(self, scope, receive, send):
        token = self._get_token_from_query(scope) or self._get_token_from_subprotocol(
            scope
        )

        if token:
            scope["user"] = await self._get_user_from_token(token)
        else:
            scope["user"] = AnonymousUser()

        return await super().__call__(scope, receive, send)

    @staticmethod
    def _get_token_from_query(scope) -> str | None:
        """Extract token from query string."""
        query_string = scope.get("query_string", b"").decode()
        params = parse_qs(query_string)
        token_list = params.get("token", [])

        return token_list[0] if token_list else None

    @staticmethod
    def _get_token_from_subprotocol(scope) -> str | None:
        """
        Extract token from WebSocket subprotocol.

        Expects: Sec-WebSocket-Protocol: jwt, <token>. The pair may follow
        the GraphQL protocol name (graphql-transport-ws, jwt, <token>).
        """
        subprotocols = list(scope.get("subprotocols", []))

        if "jwt" in subprotocols:
            index = subprotocols.index("jwt")
            if index + 1 < len(subprotocols):
                return subprotocols[index + 1]

        return None

    @database_sync_to_async
    def _get_user_from_token(self, token: str):
        user = get_user_from_token(token)
        if user.is_authenticated:
            logger.debug(f"WebSocket authenticated for user {user.id}")
        return user
