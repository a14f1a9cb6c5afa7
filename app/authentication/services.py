"""
Authentication services.

This module provides the AccountService class for registration, login,
logout and profile updates.

Related files:
    - models.py: User
    - jwt.py: Token issue/blacklist
    - signals.py: profile_updated

Security:
    - Passwords validated with Django's AUTH_PASSWORD_VALIDATORS
    - Inactive and soft-deleted accounts cannot log in
    - Login failures do not reveal whether the email exists
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError

from authentication.jwt import blacklist_refresh_token, issue_tokens
from authentication.models import User
from authentication.signals import profile_updated
from core.exceptions import AuthenticationError, ConflictError, ValidationError
from core.services import BaseService

if TYPE_CHECKING:
    from typing import Any

MAX_NAME_LENGTH = 64


class AccountService(BaseService):
    """
    Account lifecycle business logic.

    Usage:
        user = AccountService.register("a@example.com", "S3cure-pass", "Alice")
        payload = AccountService.login("a@example.com", "S3cure-pass")
        AccountService.logout(user, payload["refresh"])
    """

    @classmethod
    def _clean_name(cls, name: str) -> str:
        name = (name or "").strip()
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"Name must be at most {MAX_NAME_LENGTH} characters",
                error_code="NAME_TOO_LONG",
                details={"name": [f"At most {MAX_NAME_LENGTH} characters."]},
            )
        return name

    @classmethod
    def register(cls, email: str, password: str, name: str = "") -> User:
        """
        Create a new account.

        Raises:
            ValidationError: Missing email, invalid name or weak password
            ConflictError: EMAIL_EXISTS if the email is already registered
        """
        email = User.objects.normalize_email((email or "").strip())
        if not email:
            raise ValidationError(
                "Email is required",
                error_code="VALIDATION_ERROR",
                details={"email": ["This field is required."]},
            )

        name = cls._clean_name(name)

        if User.objects.filter(email__iexact=email).exists():
            raise ConflictError("Email already registered", error_code="EMAIL_EXISTS")

        try:
            validate_password(password, user=User(email=email, name=name))
        except DjangoValidationError as e:
            raise ValidationError(
                "Password is too weak",
                error_code="INVALID_PASSWORD",
                details={"password": list(e.messages)},
            )

        user = User.objects.create_user(email=email, password=password, name=name)
        cls.get_logger().info(f"Registered user {user.id}")
        return user

    @classmethod
    def login(cls, email: str, password: str) -> dict[str, Any]:
        """
        Check credentials and issue a token pair.

        Returns:
            Dict with "access", "refresh" and "user"

        Raises:
            AuthenticationError: INVALID_CREDENTIALS
        """
        user = authenticate(email=email, password=password)
        if user is None or user.is_deleted:
            cls.get_logger().info("Rejected login attempt")
            raise AuthenticationError(
                "Invalid email or password", error_code="INVALID_CREDENTIALS"
            )

        update_last_login(None, user)
        tokens = issue_tokens(user)

        cls.get_logger().info(f"User {user.id} logged in")
        return {**tokens, "user": user}

    @classmethod
    def logout(cls, user: User, refresh_token: str) -> bool:
        """
        Blacklist the caller's refresh token.

        Raises:
            ValidationError: INVALID_TOKEN
            PermissionDeniedError: FORBIDDEN if the token is someone else's
        """
        blacklist_refresh_token(refresh_token, user)
        cls.get_logger().info(f"User {user.id} logged out")
        return True

    @classmethod
    def update_profile(cls, user: User, name: str) -> User:
        """
        Change the caller's display name.

        Sends profile_updated so chat subscribers see the new name.
        """
        user.name = cls._clean_name(name)
        user.save(update_fields=["name", "updated_at"])

        profile_updated.send(sender=User, user=user, fields=["name"])

        cls.get_logger().info(f"User {user.id} updated profile")
        return user
