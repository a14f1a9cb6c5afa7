"""
GraphQL transport wiring.

Provides:
    ChatGraphQLView: Async Django view serving /graphql/ over HTTP
    ChatGraphQLWSConsumer: Channels consumer serving /graphql/ over WebSocket
        (graphql-transport-ws and graphql-ws protocols)

Both build a core.graphql.GraphQLContext so resolvers see the same shape:
    - HTTP: user from the ``Authorization: Bearer <access token>`` header
    - WebSocket: user attached to the scope by JWTAuthMiddleware; the consumer
      itself is exposed as ``ws`` for subscriptions
"""

from asgiref.sync import sync_to_async
from django.contrib.auth.models import AnonymousUser
from strawberry.channels import GraphQLWSConsumer
from strawberry.django.views import AsyncGraphQLView

from authentication.jwt import authenticate_request
from core.graphql import GraphQLContext


class ChatGraphQLView(AsyncGraphQLView):
    async def get_context(self, request, response) -> GraphQLContext:
        user = await sync_to_async(authenticate_request)(request)
        return GraphQLContext(request=request, response=response, user=user)


class ChatGraphQLWSConsumer(GraphQLWSConsumer):
    async def get_context(self, request, response) -> GraphQLContext:
        return GraphQLContext(
            request=request,
            response=response,
            ws=request,
            user=request.scope.get("user") or AnonymousUser(),
        )
