"""
Tests for the application exception hierarchy.
"""

import pytest

from core.exceptions import (
    AuthenticationError,
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


class TestStatusCodes:
    @pytest.mark.parametrize(
        "exc_class,status_code,default_code",
        [
            (ValidationError, 400, "VALIDATION_ERROR"),
            (AuthenticationError, 401, "UNAUTHENTICATED"),
            (PermissionDeniedError, 403, "PERMISSION_DENIED"),
            (NotFoundError, 404, "NOT_FOUND"),
            (ConflictError, 409, "CONFLICT"),
        ],
    )
    def test_defaults(self, exc_class, status_code, default_code):
        exc = exc_class("boom")

        assert isinstance(exc, BaseApplicationError)
        assert exc.status_code == status_code
        assert exc.error_code == default_code


class TestExtensions:
    def test_extensions_carry_code_and_error_code(self):
        """
        extensions is what GraphQL clients see under errors[].extensions.

        Why it matters: Clients branch on code and error_code, not messages.
        """
        exc = ConflictError("User already joined", error_code="ALREADY_JOINED")

        assert exc.extensions == {"code": 409, "error_code": "ALREADY_JOINED"}

    def test_details_are_included_when_present(self):
        exc = NotFoundError(
            "Chat not found", error_code="CHAT_NOT_FOUND", details={"chat_id": "x"}
        )

        assert exc.extensions["details"] == {"chat_id": "x"}

    def test_graphql_error_picks_up_extensions(self):
        from graphql import GraphQLError

        exc = PermissionDeniedError("Forbidden", error_code="FORBIDDEN")

        error = GraphQLError(str(exc), original_error=exc)

        assert error.extensions == {"code": 403, "error_code": "FORBIDDEN"}


class TestRepresentation:
    def test_str_is_message(self):
        assert str(ValidationError("Title too long")) == "Title too long"

    def test_repr_names_class(self):
        assert repr(ConflictError("x")).startswith("ConflictError(")
