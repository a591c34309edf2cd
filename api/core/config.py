"""
Environment-backed settings.

Values are read at call time so tests can monkeypatch the environment.
"""

from __future__ import annotations

import os

DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def db_pool_min_size() -> int:
    return max(env_int("DB_POOL_MIN_SIZE", 1), 1)


def db_pool_max_size() -> int:
    return max(env_int("DB_POOL_MAX_SIZE", 5), db_pool_min_size())


def db_command_timeout_s() -> int:
    return env_int("DB_COMMAND_TIMEOUT_S", 30)


def posts_default_limit() -> int:
    value = env_int("POSTS_DEFAULT_LIMIT", 50)
    return value if value > 0 else 50


def posts_max_limit() -> int:
    return max(env_int("POSTS_MAX_LIMIT", 100), posts_default_limit())


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
