"""
Named list filters -> SQL predicates over `posts p`.

Each `PostFilter` member maps to one clause builder. The table is checked
against the enum at import time; there is no default branch.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from core.db import SqlParams


class PostFilter(str, Enum):
    ALL = "all"
    DRAFT = "draft"
    UNREAD = "unread"
    REPLIED = "replied"
    REPLIED_BY_ME = "repliedByMe"
    UNREPLIED = "unreplied"
    UNREPLIED_BY_ME = "unrepliedByMe"


ClauseBuilder = Callable[[SqlParams, str], str]


def _all(params: SqlParams, session_user_id: str) -> str:
    return "TRUE"


def _draft(params: SqlParams, session_user_id: str) -> str:
    return "p.published = false"


def _unread(params: SqlParams, session_user_id: str) -> str:
    return (
        "NOT EXISTS (SELECT 1 FROM read_posts rf "
        f"WHERE rf.post_id = p.id AND rf.user_id = {params.bind(session_user_id)})"
    )


def _replied(params: SqlParams, session_user_id: str) -> str:
    return "EXISTS (SELECT 1 FROM comments cf WHERE cf.post_id = p.id)"


def _replied_by_me(params: SqlParams, session_user_id: str) -> str:
    return (
        "EXISTS (SELECT 1 FROM comments cf "
        f"WHERE cf.post_id = p.id AND cf.author_id = {params.bind(session_user_id)})"
    )


def _unreplied(params: SqlParams, session_user_id: str) -> str:
    return "NOT EXISTS (SELECT 1 FROM comments cf WHERE cf.post_id = p.id)"


def _unreplied_by_me(params: SqlParams, session_user_id: str) -> str:
    return (
        "NOT EXISTS (SELECT 1 FROM comments cf "
        f"WHERE cf.post_id = p.id AND cf.author_id = {params.bind(session_user_id)})"
    )


FILTER_CLAUSES: dict[PostFilter, ClauseBuilder] = {
    PostFilter.ALL: _all,
    PostFilter.DRAFT: _draft,
    PostFilter.UNREAD: _unread,
    PostFilter.REPLIED: _replied,
    PostFilter.REPLIED_BY_ME: _replied_by_me,
    PostFilter.UNREPLIED: _unreplied,
    PostFilter.UNREPLIED_BY_ME: _unreplied_by_me,
}

_unmapped = set(PostFilter) - set(FILTER_CLAUSES)
if _unmapped:
    raise RuntimeError(f"Post filters without a clause: {sorted(f.value for f in _unmapped)}")


def where_clause(post_filter: PostFilter | str, params: SqlParams, session_user_id: str) -> str:
    """
    Build the predicate for `post_filter`, binding the session user id when needed.

    An unknown filter value raises `ValueError`.
    """
    return FILTER_CLAUSES[PostFilter(post_filter)](params, session_user_id)
