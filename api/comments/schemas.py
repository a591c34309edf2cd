"""
Pydantic schemas for comment endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class AddCommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=20000)
    content_html: str | None = Field(default=None, max_length=100000)


class CommentAuthor(BaseModel):
    id: str
    name: str
    image: str | None = None


class CommentResponse(BaseModel):
    id: str
    content: str
    content_html: str
    created_at: datetime
    author: CommentAuthor


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]
    count: int
