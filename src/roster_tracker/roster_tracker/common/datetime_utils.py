from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.constants import TIMESTAMP_FORMAT


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def format_timestamp(value: Optional[datetime]) -> str:
    """Human-readable check-in time, empty string when absent."""
    if value is None:
        return ""
    return value.strftime(TIMESTAMP_FORMAT)


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")
