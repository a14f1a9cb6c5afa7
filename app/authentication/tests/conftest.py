"""
Test configuration and fixtures for authentication tests.

This module provides:
- User fixtures
- Token fixtures issued through simplejwt

Usage:
    def test_example(user, tokens):
        assert get_user_from_token(tokens["access"]) == user
"""

import pytest

from authentication.jwt import issue_tokens
from authentication.models import User
from authentication.tests.factories import UserFactory


@pytest.fixture
def user(db):
    """Create a basic active user."""
    return UserFactory(name="Alice")


@pytest.fixture
def other_user(db):
    """Create another user for ownership tests."""
    return UserFactory(name="Bob")


@pytest.fixture
def superuser(db):
    """Create a superuser with admin privileges."""
    return User.objects.create_superuser(
        email="admin@example.com",
        password="AdminPass123!",
    )


@pytest.fixture
def tokens(user):
    """Access/refresh pair for ``user``."""
    return issue_tokens(user)
