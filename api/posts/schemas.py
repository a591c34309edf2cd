"""
Pydantic schemas for post endpoints.

Response models double as the serialisation allow-list: a field missing
here never reaches a client, whatever the query returned.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from comments.schemas import CommentResponse


class AddPostRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, max_length=20000)
    content_html: str | None = Field(default=None, max_length=100000)
    anonymous: bool = False
    published: bool = True

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: object) -> object:
        # Length limits apply to the stripped title.
        return value.strip() if isinstance(value, str) else value

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be blank.")
        return value


class AuthorSummary(BaseModel):
    name: str | None = None
    image: str | None = None


class ReaderSummary(BaseModel):
    id: str
    name: str | None = None


class ReadBySummary(BaseModel):
    user: ReaderSummary


class PostResponse(BaseModel):
    id: str
    title: str
    content: str
    content_html: str
    created_at: datetime
    updated_at: datetime
    anonymous: bool
    author: AuthorSummary
    # Keyed by reader id.
    read_by: dict[str, ReadBySummary]
    comment_count: int


class PostWithCommentsResponse(PostResponse):
    comments: list[CommentResponse]


class PostPageResponse(BaseModel):
    items: list[PostWithCommentsResponse]
    next_cursor: str | None = None


class UnreadCountResponse(BaseModel):
    unread_count: int
    total_count: int


class ReadMarkerResponse(BaseModel):
    post_id: str
    user_id: str
    created_at: datetime
    updated_at: datetime
