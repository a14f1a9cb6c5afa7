"""
Root pytest configuration for the Django project.

This module configures pytest-django and provides project-wide fixtures.
App-specific fixtures are defined in each app's tests/conftest.py.
"""

import os

import django
import pytest

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()

    from django.conf import settings

    # Disable throttling during tests to prevent rate limit failures
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}

    # Use fast password hasher for tests (PBKDF2 is too slow with 870K iterations)
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]

    # Pub/sub without Redis
    settings.CHANNEL_LAYERS = {
        "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"},
    }


@pytest.fixture
def graphql():
    """
    Execute an operation against the root schema.

    Usage:
        def test_me(graphql, user):
            result = graphql("{ me { email } }", user=user)
            assert result.errors is None
    """
    from asgiref.sync import async_to_sync
    from django.contrib.auth.models import AnonymousUser

    from config.schema import schema
    from core.graphql import GraphQLContext

    def execute(query, variables=None, user=None):
        context = GraphQLContext(user=user or AnonymousUser())
        return async_to_sync(schema.execute)(
            query, variable_values=variables, context_value=context
        )

    return execute


@pytest.fixture
def error_codes():
    """Collect (code, error_code) of each error in an ExecutionResult."""

    def collect(result):
        return [
            (error.extensions.get("code"), error.extensions.get("error_code"))
            for error in result.errors or []
        ]

    return collect


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full GraphQL journeys)
    - test_services.py, test_schema.py, test_views.py, etc. → integration
    - test_models.py, test_managers.py, test_tracking.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_schema.py",
        "test_middleware.py",
        "test_pubsub.py",
        "test_jwt.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_managers.py",
        "test_signals.py",
        "test_exceptions.py",
        "test_helpers.py",
        "test_pagination.py",
        "test_tracking.py",
        "test_soft_delete_mixin.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            # Default: integration (safe for Django where most tests hit DB)
            item.add_marker(pytest.mark.integration)
