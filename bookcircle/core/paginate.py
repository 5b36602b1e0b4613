"""Cursor Pagination: "fetch one extra" page splitting over (created_at desc, id desc).

Invariants:
    - Callers fetch fetch_size(limit) == limit + 1 rows starting at the cursor (inclusive)
    - split_page returns at most `limit` rows
    - next_cursor is present iff more than `limit` rows were fetched, and names
      the first row of the following page
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, TypeVar
from uuid import UUID

from bookcircle.core.domain_types import FeedCursor


class Sortable(Protocol):
    id: UUID
    created_at: datetime


S = TypeVar("S", bound=Sortable)


def clamp_limit(limit: int | None, default: int, maximum: int) -> int:
    """Page size in 1..maximum; None falls back to default."""
    if limit is None:
        return default
    return max(1, min(limit, maximum))


def fetch_size(limit: int) -> int:
    return limit + 1


def split_page(
    rows: Sequence[S], limit: int,
) -> tuple[list[S], FeedCursor | None]:
    """Drop the lookahead row and turn it into the next cursor."""
    page = list(rows)
    if len(page) <= limit:
        return page, None
    page = page[:limit + 1]
    lookahead = page.pop()
    return page, FeedCursor(id=lookahead.id, created_at=lookahead.created_at)
