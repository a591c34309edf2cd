"""
Response post-processing for feedback items.

Anonymous posts never expose the author's name or avatar, not even to the
author, who only gets a "(you)" marker on the placeholder name.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

ANONYMOUS_NAME = "Anonymous"
SELF_MARKER = " (you)"


def key_read_by(markers: Iterable[Mapping[str, Any]]) -> dict[str, dict[str, Any]]:
    """
    Re-key read markers by reader id; key order follows first occurrence.
    """
    keyed: dict[str, dict[str, Any]] = {}
    for marker in markers:
        keyed[str(marker["user"]["id"])] = dict(marker)
    return keyed


def process_feedback_item(record: Mapping[str, Any], session_user_id: str) -> dict[str, Any]:
    item = dict(record)
    # The true author id is only compared against, never returned.
    author_id = item.pop("author_id", None)
    author = dict(item.get("author") or {})

    if item.get("anonymous"):
        author["name"] = ANONYMOUS_NAME
        author["image"] = None
        if author_id is not None and str(author_id) == str(session_user_id):
            author["name"] += SELF_MARKER

    item["author"] = author
    item["read_by"] = key_read_by(item.get("read_by") or [])
    return item
