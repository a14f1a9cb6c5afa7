"""
JWT token handling built on djangorestframework-simplejwt.

Functions:
    issue_tokens: Create an access/refresh pair for a user
    blacklist_refresh_token: Invalidate a refresh token (logout)
    get_user_from_token: Resolve a raw access token to a user
    authenticate_request: Resolve the Authorization header of an HttpRequest

Related files:
    - middleware.py: WebSocket authentication (token in query/subprotocol)
    - config/graphql.py: HTTP GraphQL view authentication

Anonymous results are returned as AnonymousUser so callers can always
check ``user.is_authenticated``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import PermissionDeniedError, ValidationError

if TYPE_CHECKING:
    from django.http import HttpRequest

    from authentication.models import User

logger = logging.getLogger(__name__)


def issue_tokens(user: User) -> dict[str, str]:
    """
    Create a new token pair for the user.

    Returns:
        Dict with "access" and "refresh" encoded tokens
    """
    refresh = RefreshToken.for_user(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


def blacklist_refresh_token(raw_token: str, user: User) -> None:
    """
    Blacklist a refresh token owned by ``user``.

    Raises:
        ValidationError: INVALID_TOKEN if the token is malformed, expired or
            already blacklisted
        PermissionDeniedError: FORBIDDEN if the token belongs to someone else
    """
    try:
        refresh = RefreshToken(raw_token)
    except TokenError as e:
        raise ValidationError(str(e), error_code="INVALID_TOKEN")

    if str(refresh.get("user_id")) != str(user.pk):
        raise PermissionDeniedError("Forbidden", error_code="FORBIDDEN")

    refresh.blacklist()


def get_user_from_token(raw_token: str):
    """
    Validate a raw access token and return its user.

    Returns:
        User if the token is valid and the account active, AnonymousUser otherwise
    """
    authentication = JWTAuthentication()
    try:
        validated = authentication.get_validated_token(raw_token)
        return authentication.get_user(validated)
    except (InvalidToken, AuthenticationFailed) as e:
        logger.warning(f"Rejected JWT token: {e}")
        return AnonymousUser()


def authenticate_request(request: HttpRequest):
    """
    Authenticate a Django request from its ``Authorization: Bearer`` header.

    Returns:
        User, or AnonymousUser when the header is absent or invalid
    """
    try:
        result = JWTAuthentication().authenticate(request)
    except (InvalidToken, AuthenticationFailed) as e:
        logger.warning(f"Rejected JWT token: {e}")
        return AnonymousUser()

    if result is None:
        return AnonymousUser()

    user, _token = result
    return user
