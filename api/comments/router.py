"""
Comment API endpoints (nested under a post).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies
from core.db import Database, get_database

from . import schemas, service

router = APIRouter(prefix="/posts/{post_id}/comments")


@router.get("", response_model=schemas.CommentListResponse)
async def list_comments(
    post_id: str,
    _: str = Depends(auth_dependencies.get_session_user_id),
    db: Database = Depends(get_database),
) -> dict:
    return await service.list_comments(db, post_id)


@router.post("", response_model=schemas.CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: str,
    payload: schemas.AddCommentRequest,
    session_user_id: str = Depends(auth_dependencies.get_session_user_id),
    db: Database = Depends(get_database),
) -> dict:
    return await service.add_comment(db, post_id, payload, session_user_id=session_user_id)
