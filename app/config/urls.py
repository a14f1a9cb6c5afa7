"""
URL configuration for the chat server.

URL Structure:
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (load balancers, Docker)
    /graphql/                      - GraphQL over HTTP (queries, mutations)
    /api/v1/auth/                  - JWT endpoints (simplejwt)
        token/                     - Obtain access/refresh pair
        token/refresh/             - Refresh access token

GraphQL subscriptions are served on the same /graphql/ path over WebSocket,
see config/routing.py.

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.conf import settings
from django.contrib import admin
from django.urls import include, path
from django.views.decorators.csrf import csrf_exempt

from config.graphql import ChatGraphQLView
from config.schema import schema
from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
]

urlpatterns = [
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # GraphQL (bearer token auth, no cookies)
    path(
        "graphql/",
        csrf_exempt(
            ChatGraphQLView.as_view(
                schema=schema,
                graphql_ide="graphiql" if settings.GRAPHQL_GRAPHIQL else None,
            )
        ),
        name="graphql",
    ),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Chat Admin"
admin.site.site_title = "Chat Admin Portal"
admin.site.index_title = "Chats, members and messages"
