"""
Explicit column allow-lists for every post/comment read path.

Always name the fields a query returns so related data (emails, password
hashes, hidden flags) never leaks into a response. Nested objects are built
with json_build_object and decoded by the pool's json codec.

Aliases expected by these expressions: `p` for posts, `c` for comments.
"""

from __future__ import annotations

AUTHOR_SUMMARY = (
    "(SELECT json_build_object('name', u.name, 'image', u.image) "
    "FROM users u WHERE u.id = p.author_id) AS author"
)

READ_BY = """COALESCE(
    (
      SELECT json_agg(
               json_build_object('user', json_build_object('id', ru.id, 'name', ru.name))
               ORDER BY r.updated_at ASC, r.user_id ASC
             )
      FROM read_posts r
      JOIN users ru ON ru.id = r.user_id
      WHERE r.post_id = p.id
    ),
    '[]'::json
  ) AS read_by"""

COMMENT_COUNT = "(SELECT count(*)::int FROM comments cc WHERE cc.post_id = p.id) AS comment_count"

COMMENTS = """COALESCE(
    (
      SELECT json_agg(
               json_build_object(
                 'id', pc.id,
                 'content', pc.content,
                 'content_html', pc.content_html,
                 'created_at', pc.created_at,
                 'author', json_build_object('id', cu.id, 'name', cu.name, 'image', cu.image)
               )
               ORDER BY pc.created_at ASC, pc.id ASC
             )
      FROM comments pc
      JOIN users cu ON cu.id = pc.author_id
      WHERE pc.post_id = p.id
    ),
    '[]'::json
  ) AS comments"""

DEFAULT_POST_SELECT: tuple[str, ...] = (
    "p.id",
    "p.title",
    "p.content",
    "p.content_html",
    "p.created_at",
    "p.updated_at",
    "p.anonymous",
    "p.author_id",
    AUTHOR_SUMMARY,
    READ_BY,
    COMMENT_COUNT,
)

WITH_COMMENTS_POST_SELECT: tuple[str, ...] = DEFAULT_POST_SELECT + (COMMENTS,)

COMMENT_SELECT: tuple[str, ...] = (
    "c.id",
    "c.content",
    "c.content_html",
    "c.created_at",
    "(SELECT json_build_object('id', u.id, 'name', u.name, 'image', u.image) "
    "FROM users u WHERE u.id = c.author_id) AS author",
)


def select_list(columns: tuple[str, ...]) -> str:
    return ",\n  ".join(columns)
