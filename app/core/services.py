"""
Base service layer patterns for business logic encapsulation.

Service Layer Philosophy:
    Services encapsulate business logic separate from resolvers and models.
    Resolvers handle GraphQL concerns, models handle data, services handle
    rules and side effects (events).

Error handling:
    Expected failures (missing records, forbidden actions, invalid state
    transitions) raise core.exceptions errors with a machine-readable
    error_code. Unexpected failures propagate unchanged.

Usage:
    from core.services import BaseService
    from core.exceptions import NotFoundError

    class ChatService(BaseService):
        @classmethod
        def get_chat(cls, chat_id) -> Chat:
            chat = Chat.objects.filter(id=chat_id).first()
            if chat is None:
                raise NotFoundError("Chat not found", error_code="CHAT_NOT_FOUND")
            return chat
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @classmethod (no instance state)
        - Raise core.exceptions for expected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Thin wrapper around Django's transaction.atomic() that makes
        transaction boundaries explicit in service code.
        """
        with transaction.atomic():
            yield
