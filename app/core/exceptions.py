"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the GraphQL and HTTP surfaces
- Machine-readable error codes for client handling
- HTTP-like status codes the client can branch on

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures (400)
    ├── AuthenticationError - Missing or invalid credentials (401)
    ├── PermissionDeniedError - Ownership/authorization failures (403)
    ├── NotFoundError - Resource not found (404)
    └── ConflictError - Invalid state transitions, duplicates (409)

Usage:
    from core.exceptions import NotFoundError, ConflictError

    raise NotFoundError("Chat not found", error_code="CHAT_NOT_FOUND")

    raise ConflictError(
        "User already joined",
        error_code="ALREADY_JOINED",
        details={"chat_id": str(chat.id)},
    )

GraphQL:
    graphql-core copies an original exception's ``extensions`` attribute onto
    the GraphQL error it wraps, so raising one of these from a resolver yields
    ``{"code": <status>, "error_code": <code>}`` in ``errors[].extensions``
    without any per-resolver handling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, ids, etc.)
        status_code: HTTP-like status surfaced to clients
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    @property
    def extensions(self) -> dict[str, Any]:
        """GraphQL error extensions for this exception."""
        extensions: dict[str, Any] = {
            "code": self.status_code,
            "error_code": self.error_code,
        }
        if self.details:
            extensions["details"] = self.details
        return extensions

    def __str__(self) -> str:
        # GraphQL clients receive str(exc) as the error message.
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Example:
        raise ValidationError(
            "Message content cannot be empty",
            error_code="EMPTY_CONTENT",
        )
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class AuthenticationError(BaseApplicationError):
    """
    Raised when the caller is not authenticated or credentials are wrong.

    Used by the GraphQL auth permission and by login.
    """

    default_error_code: str = "UNAUTHENTICATED"
    status_code: int = 401


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the caller may not act on a resource.

    Example:
        if chat_user.user_id != user.id:
            raise PermissionDeniedError("Forbidden", error_code="FORBIDDEN")
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Note:
        Point-lookup queries return null instead; use NotFoundError where the
        operation cannot proceed without the resource.
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Invalid state transitions (joining twice, leaving twice)
    - Unique constraint violations
    """

    default_error_code: str = "CONFLICT"
    status_code: int = 409
