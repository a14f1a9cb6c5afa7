"""
Tests for the HTTP endpoints: health check and GraphQL over HTTP.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from authentication.jwt import issue_tokens
from authentication.tests.factories import UserFactory


@pytest.mark.django_db
class TestHealthCheck:
    def test_healthy(self, client):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "database": "connected",
            "channel_layer": "connected",
        }

    def test_missing_channel_layer_only_degrades(self, client):
        """
        Queries and mutations work without the channel layer.

        Why it matters: Load balancers must not pull a node that can still
        serve everything except subscriptions.
        """
        with patch("core.views.get_channel_layer", return_value=None):
            response = client.get("/health/")

        assert response.status_code == 200
        assert response.json()["channel_layer"] == "not_configured"

    def test_channel_layer_check_leaves_no_message(self, client):
        """
        The channel layer check sends to a group nobody belongs to.

        Why it matters: A message sent to a fresh channel is never read and
        sits in Redis until it expires, once per health check.
        """
        layer = Mock(group_send=AsyncMock(), send=AsyncMock(), new_channel=AsyncMock())

        with patch("core.views.get_channel_layer", return_value=layer):
            response = client.get("/health/")

        assert response.json()["channel_layer"] == "connected"
        layer.group_send.assert_awaited_once_with("health-check", {"type": "health.check"})
        layer.send.assert_not_called()
        layer.new_channel.assert_not_called()


@pytest.mark.django_db
class TestGraphQLOverHttp:
    def post(self, client, query, **headers):
        return client.post(
            "/graphql/",
            data={"query": query},
            content_type="application/json",
            **headers,
        )

    def test_bearer_token_authenticates(self, client):
        """
        The HTTP view resolves the caller from the Authorization header.

        Why it matters: Every authenticated query and mutation goes this way.
        """
        user = UserFactory(name="Dana")
        access = issue_tokens(user)["access"]

        response = self.post(
            client, "{ me { name } }", HTTP_AUTHORIZATION=f"Bearer {access}"
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"me": {"name": "Dana"}}

    def test_missing_token_is_401_error(self, client):
        response = self.post(client, "{ me { name } }")

        body = response.json()
        assert body["data"] is None
        assert body["errors"][0]["extensions"] == {
            "code": 401,
            "error_code": "UNAUTHENTICATED",
        }
