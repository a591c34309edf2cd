"""
Comment persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from core.db import Database
from posts.projections import COMMENT_SELECT, select_list


async def create_comment(
    db: Database,
    *,
    post_id: str,
    author_id: str,
    content: str,
    content_html: str,
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        WITH c AS (
          INSERT INTO comments (id, post_id, author_id, content, content_html)
          VALUES ($1, $2, $3, $4, $5)
          RETURNING *
        )
        SELECT
          {select_list(COMMENT_SELECT)}
        FROM c
        """,
        uuid4().hex,
        post_id,
        author_id,
        content,
        content_html,
    )
    if row is None:
        raise RuntimeError("Failed to create comment.")
    return row


async def list_comments(db: Database, *, post_id: str) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT
          {select_list(COMMENT_SELECT)}
        FROM comments c
        WHERE c.post_id = $1
        ORDER BY c.created_at ASC, c.id ASC
        """,
        post_id,
    )
