"""
Feedback post business logic.

Every function takes the database handle and the session user's id
explicitly; nothing here reads request or global state.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status

from core import markup
from core.db import Database

from . import anonymize, pagination, repository, schemas
from .filters import PostFilter

logger = logging.getLogger(__name__)


def _not_found(post_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"No post with id '{post_id}'",
    )


async def list_posts(
    db: Database,
    *,
    session_user_id: str,
    post_filter: PostFilter = PostFilter.ALL,
    order: pagination.SortOrder = pagination.SortOrder.DESC,
    limit: int | None = None,
    cursor: str | None = None,
) -> dict[str, Any]:
    try:
        page_limit = pagination.resolve_limit(limit)
    except ValueError as exc:
        raise HTTPException(
            status_code=422,
            detail=str(exc),
        ) from exc

    rows = await repository.list_posts(
        db,
        session_user_id=session_user_id,
        post_filter=post_filter,
        order=order,
        take=pagination.fetch_size(page_limit),
        cursor=cursor,
    )
    items, next_cursor = pagination.split_page(rows, page_limit)

    processed = [anonymize.process_feedback_item(row, session_user_id) for row in items]
    processed.reverse()
    return {"items": processed, "next_cursor": next_cursor}


async def unread_count(db: Database, *, session_user_id: str) -> dict[str, int]:
    read_count = await repository.count_read_markers(db, user_id=session_user_id)
    visible_count = await repository.count_visible_posts(db)
    unread = visible_count - read_count
    if unread < 0:
        # Markers on hidden posts still count as read; left unclamped.
        logger.warning(
            "unread_count_negative user_id=%s read=%s visible=%s",
            session_user_id,
            read_count,
            visible_count,
        )
    return {"unread_count": unread, "total_count": visible_count}


async def get_post(db: Database, post_id: str, *, session_user_id: str) -> dict[str, Any]:
    row = await repository.get_post_by_id(db, post_id)
    if row is None:
        raise _not_found(post_id)
    return anonymize.process_feedback_item(row, session_user_id)


async def add_post(
    db: Database,
    payload: schemas.AddPostRequest,
    *,
    session_user_id: str,
) -> dict[str, Any]:
    row = await repository.create_post(
        db,
        author_id=session_user_id,
        title=payload.title,
        content=payload.content,
        content_html=markup.content_html_for(payload.content, payload.content_html),
        anonymous=payload.anonymous,
        published=payload.published,
    )
    logger.info("post_created post_id=%s published=%s", row["id"], payload.published)
    return anonymize.process_feedback_item(row, session_user_id)


async def set_read(db: Database, post_id: str, *, session_user_id: str) -> dict[str, Any]:
    return await repository.upsert_read_marker(db, post_id=post_id, user_id=session_user_id)


async def ensure_post_exists(db: Database, post_id: str) -> None:
    if not await repository.post_exists(db, post_id):
        raise _not_found(post_id)
