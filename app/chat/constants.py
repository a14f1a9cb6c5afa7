"""
Constants and configuration for chat module features.

This module centralizes configuration values for:
- Chat creation (title limits)
- Message operations (content limits)
- Cursor pagination (page sizes)

Import example:
    from chat.constants import CHAT_CONFIG, MESSAGE_CONFIG, PAGINATION_CONFIG
"""

from typing import Final


# =============================================================================
# Chat Configuration
# =============================================================================


class CHAT_CONFIG:
    """Configuration for chat operations."""

    MAX_TITLE_LENGTH: Final[int] = 100
    MIN_TITLE_LENGTH: Final[int] = 1


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    MAX_CONTENT_LENGTH: Final[int] = 10000  # Characters
    MIN_CONTENT_LENGTH: Final[int] = 1


# =============================================================================
# Pagination Configuration
# =============================================================================


class PAGINATION_CONFIG:
    """Configuration for keyset pagination of members and messages."""

    # Requesting this count returns every remaining row
    ALL_ROWS: Final[int] = -1

    DEFAULT_PAGE_SIZE: Final[int] = 50
