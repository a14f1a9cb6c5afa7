"""
WebSocket URL routing.

Routes:
    graphql/ - GraphQL subscriptions (and queries/mutations over WebSocket)

Authentication is handled by JWTAuthMiddleware in config/asgi.py.
"""

from django.urls import re_path

from config.graphql import ChatGraphQLWSConsumer
from config.schema import schema

websocket_urlpatterns = [
    re_path(r"^graphql/?$", ChatGraphQLWSConsumer.as_asgi(schema=schema)),
]
