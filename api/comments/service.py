"""
Comment business logic.
"""

from __future__ import annotations

import logging
from typing import Any

from core import markup
from core.db import Database
from posts import service as post_service

from . import repository, schemas

logger = logging.getLogger(__name__)


async def add_comment(
    db: Database,
    post_id: str,
    payload: schemas.AddCommentRequest,
    *,
    session_user_id: str,
) -> dict[str, Any]:
    # A missing post fails the comments.post_id foreign key; that error propagates.
    row = await repository.create_comment(
        db,
        post_id=post_id,
        author_id=session_user_id,
        content=payload.content,
        content_html=markup.content_html_for(payload.content, payload.content_html),
    )
    logger.info("comment_created comment_id=%s post_id=%s", row["id"], post_id)
    return row


async def list_comments(db: Database, post_id: str) -> dict[str, Any]:
    await post_service.ensure_post_exists(db, post_id)
    rows = await repository.list_comments(db, post_id=post_id)
    return {"comments": rows, "count": len(rows)}
