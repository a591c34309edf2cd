"""Shared fixtures and row factories."""
# ruff: noqa: E402

import sys
from pathlib import Path

# Feature packages live under api/ and are imported as top-level packages.
API_ROOT = Path(__file__).resolve().parents[1] / "api"
if str(API_ROOT) not in sys.path:
    sys.path.insert(0, str(API_ROOT))


from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from core.db import get_database
from main import create_app
from posts.pagination import SortOrder

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

SESSION_USER = {
    "id": "u-viewer",
    "email": "viewer@example.com",
    "name": "Vera Viewer",
    "image": None,
    "is_active": True,
    "created_at": BASE_TIME,
}


# ==================== Row factories ====================


def make_comment_row(**overrides: Any) -> dict[str, Any]:
    row = {
        "id": "c1",
        "content": "Thanks for the feedback",
        "content_html": "<p>Thanks for the feedback</p>",
        "created_at": BASE_TIME,
        "author": {"id": "u-commenter", "name": "Carl", "image": None},
    }
    row.update(overrides)
    return row


def make_post_row(**overrides: Any) -> dict[str, Any]:
    """A post row as the with-comments projection returns it."""
    row = {
        "id": "p1",
        "title": "The coffee machine is broken",
        "content": "Again.",
        "content_html": "<p>Again.</p>",
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
        "anonymous": False,
        "author_id": "u-author",
        "author": {"name": "Alice Author", "image": "https://img.example.com/alice.png"},
        "read_by": [],
        "comment_count": 0,
        "comments": [],
    }
    row.update(overrides)
    return row


def make_post_rows(count: int) -> list[dict[str, Any]]:
    return [
        make_post_row(id=f"p{i}", created_at=BASE_TIME + timedelta(minutes=i))
        for i in range(1, count + 1)
    ]


class InMemoryPostListing:
    """
    Stand-in for `posts.repository.list_posts` over a fixed row set.

    Orders by (created_at, id), starts at the cursor row (inclusive) and
    returns at most `take` rows; an unknown cursor returns nothing.
    """

    def __init__(self, rows: list[dict[str, Any]]) -> None:
        self.rows = rows
        self.calls: list[dict[str, Any]] = []

    async def __call__(self, db, *, session_user_id, post_filter, order, take, cursor=None):
        self.calls.append(
            {
                "session_user_id": session_user_id,
                "post_filter": post_filter,
                "order": order,
                "take": take,
                "cursor": cursor,
            }
        )
        ordered = sorted(
            self.rows,
            key=lambda r: (r["created_at"], r["id"]),
            reverse=SortOrder(order) is SortOrder.DESC,
        )
        if cursor:
            index = next((i for i, r in enumerate(ordered) if r["id"] == cursor), None)
            if index is None:
                return []
            ordered = ordered[index:]
        return [dict(r) for r in ordered[:take]]


# ==================== Fixtures ====================


@pytest.fixture
def fake_db():
    """Opaque handle; repository calls are monkeypatched in unit tests."""
    return object()


@pytest.fixture
def app(fake_db):
    application = create_app()
    application.dependency_overrides[get_database] = lambda: fake_db
    return application


@pytest.fixture
def client(app):
    """Client authenticated as SESSION_USER."""
    app.dependency_overrides[auth_dependencies.get_current_user] = lambda: dict(SESSION_USER)
    return TestClient(app)


@pytest.fixture
def anonymous_client(app):
    """Client without an auth override; requests must carry a real bearer token."""
    return TestClient(app)
