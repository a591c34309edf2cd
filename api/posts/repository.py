"""
Post and read-marker persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from core.db import Database, SqlParams

from . import filters, pagination
from .projections import DEFAULT_POST_SELECT, WITH_COMMENTS_POST_SELECT, select_list


async def list_posts(
    db: Database,
    *,
    session_user_id: str,
    post_filter: filters.PostFilter,
    order: pagination.SortOrder,
    take: int,
    cursor: str | None = None,
) -> list[dict[str, Any]]:
    """
    Fetch up to `take` posts (with comments) matching `post_filter`, in `order`,
    starting at the `cursor` row when given.
    """
    params = SqlParams()
    conditions = [filters.where_clause(post_filter, params, session_user_id)]
    if cursor:
        conditions.append(pagination.cursor_clause(params, cursor, order))

    sql = f"""
        SELECT
          {select_list(WITH_COMMENTS_POST_SELECT)}
        FROM posts p
        WHERE {" AND ".join(conditions)}
        ORDER BY {pagination.order_by_clause(order)}
        LIMIT {params.bind(take)}
        """
    return await db.fetch_all(sql, *params.values)


async def get_post_by_id(db: Database, post_id: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT
          {select_list(WITH_COMMENTS_POST_SELECT)}
        FROM posts p
        WHERE p.id = $1
        """,
        post_id,
    )


async def post_exists(db: Database, post_id: str) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM posts
        WHERE id = $1
        LIMIT 1
        """,
        post_id,
    )
    return row is not None


async def create_post(
    db: Database,
    *,
    author_id: str,
    title: str,
    content: str,
    content_html: str,
    anonymous: bool = False,
    published: bool = True,
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        WITH p AS (
          INSERT INTO posts (id, title, content, content_html, anonymous, published, author_id)
          VALUES ($1, $2, $3, $4, $5, $6, $7)
          RETURNING *
        )
        SELECT
          {select_list(DEFAULT_POST_SELECT)}
        FROM p
        """,
        uuid4().hex,
        title,
        content,
        content_html,
        anonymous,
        published,
        author_id,
    )
    if row is None:
        raise RuntimeError("Failed to create post.")
    return row


async def count_read_markers(db: Database, *, user_id: str) -> int:
    value = await db.fetch_val(
        """
        SELECT count(*)::int
        FROM read_posts
        WHERE user_id = $1
        """,
        user_id,
    )
    return int(value or 0)


async def count_visible_posts(db: Database) -> int:
    value = await db.fetch_val(
        """
        SELECT count(*)::int
        FROM posts
        WHERE hidden = false
        """
    )
    return int(value or 0)


async def upsert_read_marker(db: Database, *, post_id: str, user_id: str) -> dict[str, Any]:
    """
    Create the (post, user) marker or return the existing one unchanged.

    Single statement: concurrent calls for the same pair cannot produce two rows.
    """
    row = await db.fetch_one(
        """
        INSERT INTO read_posts (post_id, user_id)
        VALUES ($1, $2)
        ON CONFLICT (post_id, user_id) DO UPDATE
        SET updated_at = read_posts.updated_at
        RETURNING post_id, user_id, created_at, updated_at
        """,
        post_id,
        user_id,
    )
    if row is None:
        raise RuntimeError("Failed to upsert read marker.")
    return row
