"""
GraphQL operations for accounts.

Queries:
    me: The authenticated caller
    user(id): Point lookup, null if absent or deleted

Mutations:
    register(email, password, name): Create an account
    login(email, password): Issue a token pair
    logout(refresh): Blacklist a refresh token
    updateProfile(name): Change the caller's display name

Resolvers are async and call AccountService through sync_to_async.
"""

from typing import Optional

import strawberry
from asgiref.sync import sync_to_async
from strawberry.types import Info

from authentication.models import User
from authentication.services import AccountService
from authentication.types import AuthPayload, UserType
from core.graphql import IsAuthenticated, get_current_user
from core.helpers import parse_uuid


def _get_user(user_id: strawberry.ID) -> Optional[User]:
    return User.objects.filter(
        id=parse_uuid(user_id, field="id"), is_deleted=False
    ).first()


@strawberry.type
class Query:
    @strawberry.field(permission_classes=[IsAuthenticated])
    async def me(self, info: Info) -> UserType:
        return get_current_user(info)

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def user(self, info: Info, id: strawberry.ID) -> Optional[UserType]:
        return await sync_to_async(_get_user)(id)


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def register(
        self, info: Info, email: str, password: str, name: str = ""
    ) -> UserType:
        return await sync_to_async(AccountService.register)(email, password, name)

    @strawberry.mutation
    async def login(self, info: Info, email: str, password: str) -> AuthPayload:
        payload = await sync_to_async(AccountService.login)(email, password)
        return AuthPayload(
            access=payload["access"],
            refresh=payload["refresh"],
            user=payload["user"],
        )

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def logout(self, info: Info, refresh: str) -> bool:
        user = get_current_user(info)
        return await sync_to_async(AccountService.logout)(user, refresh)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def update_profile(self, info: Info, name: str) -> UserType:
        user = get_current_user(info)
        return await sync_to_async(AccountService.update_profile)(user, name)
