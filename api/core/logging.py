"""
Process-wide logging setup.

`setup_logging()` is called once from the app lifespan. The level comes from
the argument or `LOG_LEVEL` (default INFO).
"""

from __future__ import annotations

import logging
import sys

from .config import env_str

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d | %(message)s"


def _resolve_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or env_str("LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str | None = None) -> None:
    resolved = _resolve_level(level)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(resolved)

    stream_handler = logging.StreamHandler(stream=sys.stderr)
    stream_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%m-%d %H:%M:%S"))
    stream_handler.setLevel(resolved)
    root_logger.addHandler(stream_handler)

    # asyncpg is chatty at DEBUG.
    logging.getLogger("asyncpg").setLevel(max(resolved, logging.INFO))
