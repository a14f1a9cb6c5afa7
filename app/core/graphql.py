"""
GraphQL infrastructure shared by the domain schemas.

Provides:
    GraphQLContext: Uniform resolver context for HTTP and WebSocket requests
    IsAuthenticated: Strawberry permission rejecting anonymous callers (401)
    get_current_user: Authenticated user from a resolver's Info

Usage:
    import strawberry
    from core.graphql import IsAuthenticated, get_current_user

    @strawberry.type
    class Query:
        @strawberry.field(permission_classes=[IsAuthenticated])
        async def me(self, info: Info) -> UserType:
            return get_current_user(info)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from strawberry.permission import BasePermission

from core.exceptions import AuthenticationError

if TYPE_CHECKING:
    from strawberry.types import Info


@dataclass
class GraphQLContext:
    """
    Context passed to every resolver.

    Attributes:
        request: Django HttpRequest (HTTP) or the consumer (WebSocket)
        response: Temporal response for HTTP, None over WebSocket
        ws: The GraphQL WebSocket consumer; required by subscriptions
        user: Authenticated user, or None / AnonymousUser
    """

    request: Any = None
    response: Any = None
    ws: Any = None
    user: Any = None

    def __getitem__(self, key: str) -> Any:
        # Strawberry's own channels helpers read context["ws"].
        return getattr(self, key)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user is not None and self.user.is_authenticated)


class IsAuthenticated(BasePermission):
    """Allow access only when the context carries an authenticated user."""

    message = "Unauthorized"
    error_extensions = {"code": 401, "error_code": "UNAUTHENTICATED"}

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        context = info.context
        return isinstance(context, GraphQLContext) and context.is_authenticated


def get_current_user(info: Info):
    """
    Return the authenticated user for this resolver call.

    Raises:
        AuthenticationError: If the request is anonymous
    """
    context = info.context
    if not isinstance(context, GraphQLContext) or not context.is_authenticated:
        raise AuthenticationError("Unauthorized")
    return context.user
