"""
Helper functions for common infrastructure operations.

Domain-agnostic utilities:
- UUID parsing for ids received over the API
- Timezone normalisation for client-supplied timestamps

Usage:
    from core.helpers import parse_uuid, ensure_aware

    chat_id = parse_uuid(raw_id, field="chat_id")
    last_seen = ensure_aware(last_seen)
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from django.utils import timezone

from core.exceptions import ValidationError

if TYPE_CHECKING:
    from datetime import datetime


def parse_uuid(value: str | uuid.UUID, field: str = "id") -> uuid.UUID:
    """
    Parse an id received from a client.

    Raises:
        ValidationError: With error_code INVALID_ID and the offending field
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError):
        raise ValidationError(
            f"Invalid id for {field}",
            error_code="INVALID_ID",
            details={"field": field},
        )


def ensure_aware(value: datetime) -> datetime:
    """
    Return a timezone-aware datetime.

    Naive values are interpreted in the default timezone (UTC).
    """
    if timezone.is_naive(value):
        return timezone.make_aware(value, timezone.get_default_timezone())
    return value
