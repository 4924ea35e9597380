from __future__ import annotations

import logging
import os
from typing import Optional

from .cache import DEFAULT_MAX_SIZE
from .geometry import DEFAULT_DIFFICULTY, DIFFICULTIES

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(levelname)s: %(message)s"


def resolve_difficulty() -> str:
    raw = os.environ.get("SUDOKU_DIFFICULTY", DEFAULT_DIFFICULTY).strip().lower()
    if raw not in DIFFICULTIES:
        logger.warning("Ignoring SUDOKU_DIFFICULTY=%r, using %r.", raw, DEFAULT_DIFFICULTY)
        return DEFAULT_DIFFICULTY
    return raw


def resolve_log_level() -> int:
    name = os.environ.get("SUDOKU_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        logger.warning("Ignoring SUDOKU_LOG_LEVEL=%r, using %s.", name, DEFAULT_LOG_LEVEL)
        return logging.INFO
    return level


def resolve_cache_size() -> int:
    raw = os.environ.get("SUDOKU_CACHE_SIZE", "")
    if not raw.strip():
        return DEFAULT_MAX_SIZE
    try:
        return max(0, int(raw))
    except ValueError:
        logger.warning("Ignoring SUDOKU_CACHE_SIZE=%r, using %d.", raw, DEFAULT_MAX_SIZE)
        return DEFAULT_MAX_SIZE


def configure_logging(level: Optional[int] = None) -> None:
    logging.basicConfig(
        level=resolve_log_level() if level is None else level,
        format=LOG_FORMAT,
    )
