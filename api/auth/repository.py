"""
User persistence.
"""

from __future__ import annotations

from uuid import uuid4

from core.db import Database

USER_COLUMNS = "id, email, password_hash, name, image, is_active, created_at, updated_at"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(
    db: Database,
    *,
    email: str,
    password_hash: str,
    name: str,
    image: str | None = None,
) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO users (id, email, password_hash, name, image)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING {USER_COLUMNS}
        """,
        uuid4().hex,
        normalize_email(email),
        password_hash,
        name,
        image,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(db: Database, email: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {USER_COLUMNS}
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_by_id(db: Database, user_id: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {USER_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )
