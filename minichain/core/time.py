"""minichain.core.time

Blocks carry wall-clock time as text, to the second.

This module is the *only* time helper surface in the codebase.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

BLOCK_TS_FORMAT = "%Y-%m-%d %H:%M:%S"

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Return the local wall-clock time (naive)."""

    return datetime.now()


def utc_now() -> datetime:
    """Return an aware UTC datetime."""

    return datetime.now(tz=UTC)


def format_block_ts(dt: datetime) -> str:
    """Format ``dt`` as ``YYYY-MM-DD HH:MM:SS``. Sub-second precision is dropped."""

    return dt.strftime(BLOCK_TS_FORMAT)


def clock_for(name: str) -> Clock:
    if name == "utc":
        return utc_now
    if name == "local":
        return local_now
    raise ValueError(f"unknown clock: {name}")
