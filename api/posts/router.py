"""
Feedback post API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from core.db import Database, get_database

from . import schemas, service
from .filters import PostFilter
from .pagination import SortOrder

router = APIRouter(prefix="/posts")


@router.get("", response_model=schemas.PostPageResponse)
async def list_posts(
    filter: PostFilter = Query(default=PostFilter.ALL),
    order: SortOrder = Query(default=SortOrder.DESC),
    limit: int | None = Query(default=None, ge=1),
    cursor: str | None = Query(default=None, min_length=1),
    session_user_id: str = Depends(auth_dependencies.get_session_user_id),
    db: Database = Depends(get_database),
) -> dict:
    """
    One page of posts. Feed `next_cursor` back as `cursor` until it is null.
    """
    return await service.list_posts(
        db,
        session_user_id=session_user_id,
        post_filter=filter,
        order=order,
        limit=limit,
        cursor=cursor,
    )


@router.get("/unread-count", response_model=schemas.UnreadCountResponse)
async def unread_count(
    session_user_id: str = Depends(auth_dependencies.get_session_user_id),
    db: Database = Depends(get_database),
) -> dict:
    return await service.unread_count(db, session_user_id=session_user_id)


@router.get("/{post_id}", response_model=schemas.PostWithCommentsResponse)
async def get_post(
    post_id: str,
    session_user_id: str = Depends(auth_dependencies.get_session_user_id),
    db: Database = Depends(get_database),
) -> dict:
    return await service.get_post(db, post_id, session_user_id=session_user_id)


@router.post("", response_model=schemas.PostResponse, status_code=status.HTTP_201_CREATED)
async def add_post(
    payload: schemas.AddPostRequest,
    session_user_id: str = Depends(auth_dependencies.get_session_user_id),
    db: Database = Depends(get_database),
) -> dict:
    return await service.add_post(db, payload, session_user_id=session_user_id)


@router.post("/{post_id}/read", response_model=schemas.ReadMarkerResponse)
async def set_read(
    post_id: str,
    session_user_id: str = Depends(auth_dependencies.get_session_user_id),
    db: Database = Depends(get_database),
) -> dict:
    """
    Mark a post read for the current user. Safe to repeat.
    """
    return await service.set_read(db, post_id, session_user_id=session_user_id)
