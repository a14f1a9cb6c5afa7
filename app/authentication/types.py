"""
GraphQL types for accounts.

Types:
    UserType: Public view of a User
    AuthPayload: Result of login (token pair plus user)

Resolvers receive the User model instance as ``self``.
"""

from datetime import datetime

import strawberry


@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    email: str
    name: str

    @strawberry.field
    def created_at(self) -> datetime:
        return self.date_joined

    @strawberry.field
    def display_name(self) -> str:
        return self.get_full_name()


@strawberry.type
class AuthPayload:
    """Token pair issued by login."""

    access: str
    refresh: str
    user: UserType
