"""
Core Application - Infrastructure & Base Classes

Generic, reusable base classes with no chat-specific logic.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key
    - SoftDeleteMixin: Soft delete support (is_deleted, deleted_at)

Managers (import from core.managers):
    - SoftDeleteManager: Filter deleted records by default
    - SoftDeleteQuerySet: QuerySet with soft delete operations

Services (import from core.services):
    - BaseService: Base class for service layer

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error and status codes
    - ValidationError, AuthenticationError, PermissionDeniedError,
      NotFoundError, ConflictError

GraphQL (import from core.graphql):
    - GraphQLContext, IsAuthenticated, get_current_user

Helpers (import from core.helpers):
    - parse_uuid, ensure_aware

Note:
    Django models, managers and the GraphQL helpers are NOT imported here to
    avoid AppRegistryNotReady errors. Import them directly from their modules.
"""

from .services import BaseService

from .exceptions import (
    AuthenticationError,
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

__all__ = [
    "BaseService",
    "BaseApplicationError",
    "ValidationError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
]
