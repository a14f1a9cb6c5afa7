"""
Keyset pagination for chat members and messages.

Rows are ordered by a composite key (created_at, <tiebreaker>) ascending.
The client passes back the key of the last row it holds and receives the
rows strictly after it.

Design Decisions:
    - Keyset instead of offset: stable while rows are inserted concurrently
    - The cursor applies only when both parts of the key are present
    - count = -1 returns every remaining row
    - has_more is true iff the page is full. It is an approximation: a full
      last page reports has_more=True and the next request returns nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from django.db.models import Q

from chat.constants import PAGINATION_CONFIG
from core.exceptions import ValidationError

if TYPE_CHECKING:
    from datetime import datetime

    from django.db.models import QuerySet

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results."""

    items: list[T] = field(default_factory=list)
    has_more: bool = False


def validate_count(count: int) -> int:
    """
    Check a requested page size.

    Raises:
        ValidationError: INVALID_COUNT unless count is positive or -1
    """
    if count == PAGINATION_CONFIG.ALL_ROWS or count > 0:
        return count
    raise ValidationError(
        "count must be a positive integer or -1",
        error_code="INVALID_COUNT",
        details={"count": count},
    )


def keyset_paginate(
    queryset: QuerySet,
    count: int,
    tiebreaker: str,
    last_created_at: datetime | None = None,
    last_key: Any = None,
) -> Page:
    """
    Return the page of ``queryset`` following the (created_at, tiebreaker) key.

    Args:
        queryset: Rows to page through (already filtered)
        count: Page size, or -1 for all remaining rows
        tiebreaker: Second ordering column (e.g. "user_id", "id")
        last_created_at: created_at of the last row the client holds
        last_key: tiebreaker value of that row

    Example:
        page = keyset_paginate(
            ChatUser.objects.filter(chat=chat),
            count=20,
            tiebreaker="user_id",
            last_created_at=cursor_created_at,
            last_key=cursor_user_id,
        )
    """
    count = validate_count(count)

    if last_created_at is not None and last_key is not None:
        queryset = queryset.filter(
            Q(created_at__gt=last_created_at)
            | Q(created_at=last_created_at, **{f"{tiebreaker}__gt": last_key})
        )

    queryset = queryset.order_by("created_at", tiebreaker)

    if count != PAGINATION_CONFIG.ALL_ROWS:
        queryset = queryset[:count]

    items = list(queryset)
    return Page(items=items, has_more=len(items) == count)
