"""
Async database access (raw SQL) using asyncpg.

`Database` owns one connection pool. The app lifespan opens it on startup,
stores it on `app.state.db` and closes it on shutdown (see `api/main.py`).
Handlers receive it through the `get_database` dependency and pass it down
explicitly; there is no module-level handle.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import config

logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def _init_connection(conn: asyncpg.Connection) -> None:
    # Projections build nested objects with json_build_object/json_agg.
    await conn.set_type_codec("json", encoder=json.dumps, decoder=json.loads, schema="pg_catalog")


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    """
    Thin wrapper over an asyncpg pool returning plain dicts.
    """

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    @classmethod
    async def connect(cls, dsn: str | None = None) -> Database:
        pool = await asyncpg.create_pool(
            dsn=dsn or database_url(),
            min_size=config.db_pool_min_size(),
            max_size=config.db_pool_max_size(),
            command_timeout=config.db_command_timeout_s(),
            init=_init_connection,
        )
        logger.info(
            "db_pool_opened min_size=%s max_size=%s",
            config.db_pool_min_size(),
            config.db_pool_max_size(),
        )
        return cls(pool)

    async def close(self) -> None:
        await self._pool.close()
        logger.info("db_pool_closed")

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        row = await self._pool.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        rows = await self._pool.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def fetch_val(self, sql: str, *args: Any) -> Any:
        return await self._pool.fetchval(sql, *args)

    async def execute(self, sql: str, *args: Any) -> None:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
        """
        await self._pool.execute(sql, *args)


def get_database(request: Request) -> Database:
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database is not initialized. Open it in the app lifespan.")
    return db


class SqlParams:
    """
    Collects positional arguments while a query is assembled.

    `bind(value)` appends the value and returns its `$n` placeholder, so
    clause builders never interpolate values into SQL text.
    """

    def __init__(self) -> None:
        self.values: list[Any] = []

    def bind(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"
