"""
Root GraphQL schema.

Merges the per-app Query and Mutation types; subscriptions all live in the
chat app.
"""

import strawberry
from strawberry.tools import merge_types

from authentication.schema import Mutation as AuthenticationMutation
from authentication.schema import Query as AuthenticationQuery
from chat.schema import Mutation as ChatMutation
from chat.schema import Query as ChatQuery
from chat.schema import Subscription

Query = merge_types("Query", (AuthenticationQuery, ChatQuery))
Mutation = merge_types("Mutation", (AuthenticationMutation, ChatMutation))

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
)
