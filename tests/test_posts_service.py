"""Post service: pagination, read tracking, add/byId."""

import logging
import warnings
from unittest.mock import AsyncMock

import pytest
from conftest import InMemoryPostListing, make_post_row, make_post_rows
from fastapi import HTTPException
from pydantic import ValidationError

from posts import repository, service
from posts.filters import PostFilter
from posts.pagination import SortOrder
from posts.schemas import AddPostRequest


async def _collect_pages(fake_db, *, order, limit):
    pages = []
    cursor = None
    while True:
        page = await service.list_posts(
            fake_db,
            session_user_id="u1",
            order=order,
            limit=limit,
            cursor=cursor,
        )
        pages.append(page)
        cursor = page["next_cursor"]
        if cursor is None:
            return pages


# ==================== list ====================


@pytest.mark.asyncio
async def test_list_over_fetches_and_binds_session(monkeypatch, fake_db):
    listing = InMemoryPostListing(make_post_rows(5))
    monkeypatch.setattr(repository, "list_posts", listing)

    page = await service.list_posts(
        fake_db,
        session_user_id="u1",
        post_filter=PostFilter.UNREAD,
        order=SortOrder.ASC,
        limit=2,
    )

    assert listing.calls == [
        {
            "session_user_id": "u1",
            "post_filter": PostFilter.UNREAD,
            "order": SortOrder.ASC,
            "take": 3,
            "cursor": None,
        }
    ]
    assert page["next_cursor"] == "p3"


@pytest.mark.asyncio
async def test_list_ascending_page_is_reversed(monkeypatch, fake_db):
    monkeypatch.setattr(repository, "list_posts", InMemoryPostListing(make_post_rows(5)))

    page = await service.list_posts(fake_db, session_user_id="u1", order=SortOrder.ASC, limit=2)

    assert [item["id"] for item in page["items"]] == ["p2", "p1"]
    assert page["next_cursor"] == "p3"


@pytest.mark.asyncio
async def test_list_descending_page_is_reversed(monkeypatch, fake_db):
    monkeypatch.setattr(repository, "list_posts", InMemoryPostListing(make_post_rows(5)))

    page = await service.list_posts(fake_db, session_user_id="u1", order=SortOrder.DESC, limit=2)

    assert [item["id"] for item in page["items"]] == ["p4", "p5"]
    assert page["next_cursor"] == "p3"


@pytest.mark.asyncio
@pytest.mark.parametrize("order", [SortOrder.ASC, SortOrder.DESC])
@pytest.mark.parametrize("limit", [1, 3, 7, 10])
async def test_cursor_walk_matches_single_fetch(monkeypatch, fake_db, order, limit):
    monkeypatch.setattr(repository, "list_posts", InMemoryPostListing(make_post_rows(7)))

    pages = await _collect_pages(fake_db, order=order, limit=limit)
    walked = [item["id"] for page in pages for item in reversed(page["items"])]

    single = await service.list_posts(fake_db, session_user_id="u1", order=order, limit=50)
    expected = [item["id"] for item in reversed(single["items"])]

    assert single["next_cursor"] is None
    assert walked == expected
    assert len(set(walked)) == 7
    assert all(len(page["items"]) <= limit for page in pages)


@pytest.mark.asyncio
async def test_list_unknown_cursor_is_empty_page(monkeypatch, fake_db):
    monkeypatch.setattr(repository, "list_posts", InMemoryPostListing(make_post_rows(3)))

    page = await service.list_posts(fake_db, session_user_id="u1", cursor="missing")

    assert page == {"items": [], "next_cursor": None}


@pytest.mark.asyncio
async def test_list_anonymises_items(monkeypatch, fake_db):
    rows = [
        make_post_row(id="p1", anonymous=True, author_id="u1"),
        make_post_row(id="p2", anonymous=True, author_id="u2"),
    ]
    monkeypatch.setattr(repository, "list_posts", InMemoryPostListing(rows))

    page = await service.list_posts(fake_db, session_user_id="u1", order=SortOrder.ASC)
    names = {item["id"]: item["author"]["name"] for item in page["items"]}

    assert names == {"p1": "Anonymous (you)", "p2": "Anonymous"}
    assert all("author_id" not in item for item in page["items"])


@pytest.mark.asyncio
async def test_list_rejects_oversized_limit(monkeypatch, fake_db):
    monkeypatch.setenv("POSTS_MAX_LIMIT", "100")
    monkeypatch.setattr(repository, "list_posts", InMemoryPostListing([]))

    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        with pytest.raises(HTTPException) as excinfo:
            await service.list_posts(fake_db, session_user_id="u1", limit=101)

    assert excinfo.value.status_code == 422
    assert excinfo.value.detail == "limit must be <= 100."


# ==================== unread count ====================


@pytest.mark.asyncio
async def test_unread_count(monkeypatch, fake_db):
    read = AsyncMock(return_value=2)
    monkeypatch.setattr(repository, "count_read_markers", read)
    monkeypatch.setattr(repository, "count_visible_posts", AsyncMock(return_value=5))

    result = await service.unread_count(fake_db, session_user_id="u1")

    assert result == {"unread_count": 3, "total_count": 5}
    read.assert_awaited_once_with(fake_db, user_id="u1")


@pytest.mark.asyncio
async def test_unread_count_with_stale_markers_goes_negative(monkeypatch, fake_db, caplog):
    monkeypatch.setattr(repository, "count_read_markers", AsyncMock(return_value=6))
    monkeypatch.setattr(repository, "count_visible_posts", AsyncMock(return_value=5))

    with caplog.at_level(logging.WARNING, logger="posts.service"):
        result = await service.unread_count(fake_db, session_user_id="u1")

    assert result == {"unread_count": -1, "total_count": 5}
    assert "unread_count_negative" in caplog.text


# ==================== byId / add / setRead ====================


@pytest.mark.asyncio
async def test_get_post_not_found(monkeypatch, fake_db):
    monkeypatch.setattr(repository, "get_post_by_id", AsyncMock(return_value=None))

    with pytest.raises(HTTPException) as excinfo:
        await service.get_post(fake_db, "nope", session_user_id="u1")

    assert excinfo.value.status_code == 404
    assert excinfo.value.detail == "No post with id 'nope'"


@pytest.mark.asyncio
async def test_get_post_is_processed(monkeypatch, fake_db):
    row = make_post_row(anonymous=True, author_id="u1", read_by=[{"user": {"id": "u9", "name": "Nia"}}])
    monkeypatch.setattr(repository, "get_post_by_id", AsyncMock(return_value=row))

    item = await service.get_post(fake_db, "p1", session_user_id="u1")

    assert item["author"] == {"name": "Anonymous (you)", "image": None}
    assert item["read_by"] == {"u9": {"user": {"id": "u9", "name": "Nia"}}}


@pytest.mark.asyncio
async def test_add_post_renders_markdown_and_anonymises(monkeypatch, fake_db):
    create = AsyncMock(
        return_value=make_post_row(id="new", anonymous=True, author_id="u1", comments=None)
    )
    monkeypatch.setattr(repository, "create_post", create)

    payload = AddPostRequest(title="  T  ", content="**C**", anonymous=True)
    item = await service.add_post(fake_db, payload, session_user_id="u1")

    kwargs = create.await_args.kwargs
    assert kwargs["author_id"] == "u1"
    assert kwargs["title"] == "T"
    assert kwargs["anonymous"] is True
    assert kwargs["published"] is True
    assert "<strong>C</strong>" in kwargs["content_html"]
    assert item["author"]["name"] == "Anonymous (you)"


@pytest.mark.asyncio
async def test_add_post_sanitises_client_html(monkeypatch, fake_db):
    create = AsyncMock(return_value=make_post_row())
    monkeypatch.setattr(repository, "create_post", create)

    payload = AddPostRequest(title="T", content="C", content_html="<p>C</p><script>alert(1)</script>")
    await service.add_post(fake_db, payload, session_user_id="u1")

    html = create.await_args.kwargs["content_html"]
    assert "<p>C</p>" in html
    assert "<script>" not in html


@pytest.mark.asyncio
async def test_set_read_upserts_for_session_user(monkeypatch, fake_db):
    marker = {"post_id": "p1", "user_id": "u1", "created_at": None, "updated_at": None}
    upsert = AsyncMock(return_value=marker)
    monkeypatch.setattr(repository, "upsert_read_marker", upsert)

    assert await service.set_read(fake_db, "p1", session_user_id="u1") == marker
    upsert.assert_awaited_once_with(fake_db, post_id="p1", user_id="u1")


def test_add_post_request_strips_title():
    assert AddPostRequest(title="  Broken lift  ", content="C").title == "Broken lift"


def test_add_post_request_rejects_blank_title():
    with pytest.raises(ValidationError):
        AddPostRequest(title="   ", content="C")
