"""
Markdown rendering and HTML sanitising for user-written content.

Posts and comments keep the raw text in `content` and a rendered,
sanitised copy in `content_html`.
"""

from __future__ import annotations

import bleach
import markdown2

MARKDOWN_EXTRAS = ["fenced-code-blocks", "tables", "strike", "cuddled-lists"]

ALLOWED_TAGS = frozenset(
    {
        "a",
        "b",
        "blockquote",
        "br",
        "code",
        "del",
        "em",
        "h1",
        "h2",
        "h3",
        "h4",
        "hr",
        "i",
        "li",
        "ol",
        "p",
        "pre",
        "s",
        "strong",
        "table",
        "tbody",
        "td",
        "th",
        "thead",
        "tr",
        "ul",
    }
)

ALLOWED_ATTRIBUTES = {
    "a": ["href", "title", "rel"],
    "code": ["class"],
}

_cleaner = bleach.Cleaner(
    tags=ALLOWED_TAGS,
    attributes=ALLOWED_ATTRIBUTES,
    protocols=["http", "https", "mailto"],
    strip=True,
)


def sanitize_html(html: str) -> str:
    return _cleaner.clean(html or "")


def render_markdown(text: str) -> str:
    if not (text or "").strip():
        return ""
    return sanitize_html(markdown2.markdown(text, extras=MARKDOWN_EXTRAS)).strip()


def content_html_for(content: str, content_html: str | None = None) -> str:
    """
    Prefer client-rendered HTML (sanitised) and fall back to rendering `content`.
    """
    if content_html is not None and content_html.strip():
        return sanitize_html(content_html)
    return render_markdown(content)
