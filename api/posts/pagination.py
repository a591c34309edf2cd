"""
Cursor pagination for post listings.

A page request fetches `limit + 1` rows ordered by (created_at, id) starting
at the cursor row. The extra row is not returned; its id becomes the next
cursor, so the following request starts exactly where this one stopped.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from core import config
from core.db import SqlParams


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def resolve_limit(limit: int | None) -> int:
    if limit is None:
        return config.posts_default_limit()
    if limit < 1:
        raise ValueError("limit must be a positive integer.")
    max_limit = config.posts_max_limit()
    if limit > max_limit:
        raise ValueError(f"limit must be <= {max_limit}.")
    return limit


def fetch_size(limit: int) -> int:
    # One extra row tells us whether another page exists.
    return limit + 1


def order_by_clause(order: SortOrder | str) -> str:
    direction = "ASC" if SortOrder(order) is SortOrder.ASC else "DESC"
    return f"p.created_at {direction}, p.id {direction}"


def cursor_clause(params: SqlParams, cursor: str, order: SortOrder | str) -> str:
    """
    Rows at or after the cursor row in fetch order.

    An unknown cursor compares against NULL and matches nothing.
    """
    op = ">=" if SortOrder(order) is SortOrder.ASC else "<="
    return (
        f"(p.created_at, p.id) {op} "
        f"(SELECT cp.created_at, cp.id FROM posts cp WHERE cp.id = {params.bind(cursor)})"
    )


def split_page(rows: list[dict[str, Any]], limit: int) -> tuple[list[dict[str, Any]], str | None]:
    """
    Trim an over-fetched result to `limit` rows.

    Returns the page and the id of the first row of the next page (or None
    at the end of the stream).
    """
    items = list(rows)
    next_cursor: str | None = None
    if len(items) > limit:
        next_item = items.pop()
        next_cursor = str(next_item["id"])
    return items, next_cursor
